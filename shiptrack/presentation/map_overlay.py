"""Markers and route segments for the tracking map.

Each of origin, destination and current location is geocoded on its own; a
point that does not resolve just drops its marker and any segment touching it.
"""
from typing import Optional

from shiptrack.services.geocoding import Coordinates, Geocoder, format_address

MARKERS = (
    ("origin", "Origin", "green"),
    ("current", "Current", "blue"),
    ("destination", "Destination", "red"),
)

def _point(coords: Optional[Coordinates]) -> Optional[dict]:
    if coords is None:
        return None
    lat, lng = coords
    return {"lat": lat, "lng": lng}

def _resolve(text: Optional[str], lat: Optional[float], lng: Optional[float], geocode: Geocoder) -> Optional[Coordinates]:
    # Stored coordinates win over a lookup
    if lat is not None and lng is not None:
        return lat, lng
    if not text:
        return None
    return geocode(text)

def _address(shipment: dict, prefix: str) -> Optional[str]:
    return format_address(
        shipment.get(f"{prefix}_street_address"),
        shipment.get(f"{prefix}_city"),
        shipment.get(f"{prefix}_state"),
        shipment.get(f"{prefix}_country"),
    ) or None

def build_map_overlay(shipment: dict, geocode: Geocoder) -> dict:
    """``shipment`` is the snake_case dict produced by the shipment service."""
    locations = {
        "origin": shipment.get("origin") or _address(shipment, "origin"),
        "current": shipment.get("current_location"),
        "destination": shipment.get("destination") or _address(shipment, "destination"),
    }
    points = {
        "origin": _point(_resolve(locations["origin"], shipment.get("origin_latitude"),
                                  shipment.get("origin_longitude"), geocode)),
        "current": _point(_resolve(locations["current"], shipment.get("current_latitude"),
                                   shipment.get("current_longitude"), geocode)),
        "destination": _point(_resolve(locations["destination"], shipment.get("destination_latitude"),
                                       shipment.get("destination_longitude"), geocode)),
    }

    markers = [
        {"kind": kind, "label": label, "color": color, "location": locations[kind], **points[kind]}
        for kind, label, color in MARKERS
        if points[kind] is not None
    ]

    routes = []
    origin, current, destination = points["origin"], points["current"], points["destination"]
    if origin and current:
        routes.append({"type": "traveled", "points": [origin, current]})
    if current and destination:
        routes.append({"type": "remaining", "points": [current, destination]})
    if not current and origin and destination:
        routes.append({"type": "remaining", "points": [origin, destination]})

    return {
        "legend": {
            "origin": locations["origin"] or "Unknown Origin",
            "current": locations["current"],
            "destination": locations["destination"] or "Unknown Destination",
        },
        "markers": markers,
        "routes": routes,
    }
