import logging
from typing import Callable, Optional, Tuple

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, stop_after_delay, wait_fixed

from shiptrack.core.config import settings

logger = logging.getLogger(__name__)

Coordinates = Tuple[float, float]
Geocoder = Callable[[str], Optional[Coordinates]]

def format_address(street: Optional[str] = None, city: Optional[str] = None,
                   state: Optional[str] = None, country: Optional[str] = None) -> str:
    """Join the non-blank address parts into one searchable line."""
    return ", ".join(p.strip() for p in (street, city, state, country) if p and p.strip())

def _client() -> httpx.Client:
    return httpx.Client(
        timeout=settings.GEOCODER_TIMEOUT_SECONDS,
        headers={"Accept": "application/json", "User-Agent": settings.GEOCODER_USER_AGENT},
    )

@retry(
    stop=(stop_after_attempt(2) | stop_after_delay(settings.GEOCODER_RETRY_DEADLINE_SECONDS)),
    wait=wait_fixed(0.5),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
def _search(http: httpx.Client, query: str):
    resp = http.get(settings.GEOCODER_URL, params={"format": "json", "q": query, "limit": 1})
    resp.raise_for_status()
    return resp.json()

def geocode_location(query: Optional[str], client: Optional[httpx.Client] = None) -> Optional[Coordinates]:
    """Best-effort lookup of (lat, lng) for a free-text location. Never raises."""
    if not query or not query.strip() or not settings.GEOCODING_ENABLED:
        return None

    owns_client = client is None
    http = client or _client()
    try:
        results = _search(http, query.strip())
        if not results:
            logger.info(f"No geocoding match for {query!r}")
            return None
        return float(results[0]["lat"]), float(results[0]["lon"])
    except httpx.HTTPError as e:
        logger.error(f"Geocoding request failed for {query!r}: {e}")
        return None
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.error(f"Unexpected geocoding response for {query!r}: {e}")
        return None
    finally:
        if owns_client:
            http.close()

def get_geocoder() -> Geocoder:
    return geocode_location
