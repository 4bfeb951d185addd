"""Session and tracking-access tokens carried in cookies.

Both are HS256-signed JWTs. Decoding never raises: a missing, malformed,
tampered or expired token is simply "no principal".
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

import jwt
from starlette.requests import cookie_parser

from shiptrack.core.config import settings

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "session"
TRACKING_TOKEN_TYPE = "tracking_access"


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: str
    is_admin: bool = False

    def to_dict(self) -> dict:
        return {"id": self.user_id, "email": self.email, "name": None, "isAdmin": self.is_admin}


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _encode(payload: dict) -> str:
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, token_type: str) -> Optional[dict]:
    if not token:
        return None
    try:
        claims = jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Expired %s token", token_type)
        return None
    except jwt.InvalidTokenError:
        logger.debug("Invalid %s token", token_type)
        return None
    if claims.get("type") != token_type:
        return None
    return claims


def encode_session(user_id: str, email: str, is_admin: bool, now: Optional[datetime] = None) -> str:
    exp = _now(now) + timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)
    return _encode({
        "userId": str(user_id),
        "email": email,
        "isAdmin": bool(is_admin),
        "exp": exp,
        "type": SESSION_TOKEN_TYPE,
    })


def decode_session(token: Optional[str]) -> Optional[Principal]:
    claims = _decode(token or "", SESSION_TOKEN_TYPE)
    if not claims:
        return None
    user_id, email = claims.get("userId"), claims.get("email")
    if not user_id or not email:
        return None
    return Principal(user_id=user_id, email=email, is_admin=bool(claims.get("isAdmin")))


def session_from_cookie_header(header: Optional[str]) -> Optional[Principal]:
    if not header:
        return None
    try:
        cookies = cookie_parser(header)
    except Exception as e:
        logger.warning(f"Unparseable cookie header: {e}")
        return None
    return decode_session(cookies.get(settings.SESSION_COOKIE_NAME))


def encode_tracking_access(tracking_number: str, now: Optional[datetime] = None) -> str:
    issued = _now(now)
    return _encode({
        "trackingNumber": tracking_number,
        "iat": issued,
        "exp": issued + timedelta(seconds=settings.TRACKING_ACCESS_MAX_AGE_SECONDS),
        "type": TRACKING_TOKEN_TYPE,
    })


def decode_tracking_access(token: Optional[str]) -> Optional[str]:
    claims = _decode(token or "", TRACKING_TOKEN_TYPE)
    return claims.get("trackingNumber") if claims else None
