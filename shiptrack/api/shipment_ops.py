"""CRUD flow shared by the admin and user shipment routers.

``owner_id`` is the scope: ``None`` for admin (every shipment), the caller's
id for user routes. Each write answers with a fresh read of the shipment.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiptrack.api.schemas import ShipmentCreate, ShipmentWrite
from shiptrack.core.casing import to_camel
from shiptrack.core.errors import UpstreamError, ValidationError
from shiptrack.services import shipments as shipment_service
from shiptrack.services import users as user_service

logger = logging.getLogger(__name__)


def _upstream(action: str, e: SQLAlchemyError) -> UpstreamError:
    logger.error(f"Failed to {action}: {e}")
    return UpstreamError(f"Failed to {action}", error=type(e).__name__)


def _check_assignee(db: Session, user_id: Optional[str]) -> None:
    if user_id is not None and user_service.get_user(db, user_id) is None:
        raise ValidationError("Assigned user does not exist")


def list_shipments(db: Session, owner_id: Optional[str]) -> dict:
    try:
        rows = shipment_service.load_shipments(db, owner_id)
    except SQLAlchemyError as e:
        raise _upstream("fetch shipments", e)
    return {"success": True, "data": to_camel(rows)}


def get_shipment(db: Session, shipment_id: str, owner_id: Optional[str]) -> dict:
    try:
        row = shipment_service.load_shipment(db, shipment_id, owner_id)
    except SQLAlchemyError as e:
        raise _upstream("fetch shipment", e)
    return {"success": True, "data": to_camel(row)}


def create_shipment(db: Session, payload: ShipmentCreate, owner_id: Optional[str], admin: bool = False) -> dict:
    # User scope always owns what it creates; admin may assign anyone or no one
    if admin:
        owner_id = payload.user_id if payload.assigns_owner else None
    try:
        if admin:
            _check_assignee(db, owner_id)
        shipment = shipment_service.create_shipment(db, payload.column_values(), payload.events, owner_id)
        row = shipment_service.load_shipment(db, shipment.id)
    except SQLAlchemyError as e:
        raise _upstream("create shipment", e)
    return {"success": True, "data": to_camel(row), "message": "Shipment created successfully"}


def update_shipment(db: Session, shipment_id: str, payload: ShipmentWrite, owner_id: Optional[str], admin: bool = False) -> dict:
    try:
        shipment = shipment_service.get_shipment(db, shipment_id, owner_id)
        extra = {}
        if admin and payload.assigns_owner:
            _check_assignee(db, payload.user_id)
            extra["owner_id"] = payload.user_id
        shipment_service.update_shipment(db, shipment, payload.column_values(), payload.events, **extra)
        row = shipment_service.load_shipment(db, shipment.id)
    except SQLAlchemyError as e:
        raise _upstream("update shipment", e)
    return {"success": True, "data": to_camel(row), "message": "Shipment updated successfully"}


def delete_shipment(db: Session, shipment_id: str, owner_id: Optional[str]) -> dict:
    try:
        shipment = shipment_service.get_shipment(db, shipment_id, owner_id)
        shipment_service.delete_shipment(db, shipment)
    except SQLAlchemyError as e:
        raise _upstream("delete shipment", e)
    return {"success": True, "message": "Shipment deleted successfully"}
