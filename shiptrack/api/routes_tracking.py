"""Public tracking: no session or ownership checks on this path."""
import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiptrack.api.cookies import set_tracking_cookie
from shiptrack.api.deps import get_db
from shiptrack.api.schemas import TrackRequest
from shiptrack.core.casing import to_camel
from shiptrack.core.config import settings
from shiptrack.core.errors import NotFound, UpstreamError, ValidationError
from shiptrack.core.limiting import limiter
from shiptrack.presentation.map_overlay import build_map_overlay
from shiptrack.presentation.progress import build_progress
from shiptrack.presentation.timeline import build_timeline, format_date
from shiptrack.security.session import encode_tracking_access
from shiptrack.services import shipments as shipment_service
from shiptrack.services.geocoding import Geocoder, get_geocoder

logger = logging.getLogger(__name__)
router = APIRouter()  # main.py mounts at /api

@router.post("/track")
@limiter.limit(settings.TRACK_RATE_LIMIT)
def track(request: Request, payload: TrackRequest, response: Response, db: Session = Depends(get_db)) -> dict:
    tracking_number = (payload.tracking_number or "").strip()
    if not tracking_number:
        raise ValidationError("Tracking number is required")

    try:
        shipment = shipment_service.find_by_tracking_number(db, tracking_number)
    except SQLAlchemyError as e:
        logger.error(f"Track lookup failed for {tracking_number}: {e}")
        raise UpstreamError("Failed to track shipment")
    if shipment is None:
        logger.info(f"Shipment not found: {tracking_number}")
        raise NotFound("Shipment not found")

    set_tracking_cookie(response, encode_tracking_access(shipment.tracking_number))
    return {"success": True, "shipmentId": shipment.id, "trackingNumber": shipment.tracking_number}

def _load_public(db: Session, key: str) -> dict:
    try:
        shipment = shipment_service.find_by_tracking_number_or_id(db, key)
        return shipment_service.load_shipment(db, shipment.id)
    except SQLAlchemyError as e:
        logger.error(f"Public fetch failed for {key}: {e}")
        raise UpstreamError("Failed to fetch shipment")

@router.get("/tracking/{key}")
def get_tracking(key: str, db: Session = Depends(get_db)) -> dict:
    data = _load_public(db, key)
    return {"success": True, "data": to_camel(data), "message": "Shipment retrieved successfully"}

@router.get("/tracking/{key}/overview")
def get_tracking_overview(key: str, db: Session = Depends(get_db), geocode: Geocoder = Depends(get_geocoder)) -> dict:
    """Everything the tracking page draws: progress bar, history, dates and map."""
    data = _load_public(db, key)
    overview = {
        "tracking_number": data["tracking_number"],
        "shipment_status": data.get("shipment_status") or "Pending",
        "status_color": data.get("status_color") or "#22c55e",
        "status_details": data.get("status_details") or "No status details available",
        "shipped": format_date(data.get("shipment_date"), with_year=False, empty="N/A"),
        "delivery_by": format_date(data.get("estimated_delivery_date"), with_year=False, empty="N/A"),
        "progress": build_progress(data.get("tracking_progress")),
        "timeline": build_timeline(data["events"]),
        "map": build_map_overlay(data, geocode),
    }
    return {"success": True, "data": to_camel(overview)}
