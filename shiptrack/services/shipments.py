"""Shipment and tracking-event persistence.

Every query takes an optional ``owner_id``; when given, rows owned by anyone
else are indistinguishable from rows that do not exist.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiptrack.core.clock import isoformat_utc, utcnow
from shiptrack.core.errors import Conflict, NotFound
from shiptrack.db.models import SHIPMENT_WRITABLE_COLUMNS, Shipment, TrackingEvent

logger = logging.getLogger(__name__)

KEEP_OWNER = object()


def _scoped(stmt, owner_id: Optional[str]):
    if owner_id is not None:
        stmt = stmt.where(Shipment.user_id == owner_id)
    return stmt


def list_shipments(db: Session, owner_id: Optional[str] = None) -> List[Shipment]:
    stmt = _scoped(select(Shipment), owner_id).order_by(Shipment.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def get_shipment(db: Session, shipment_id: str, owner_id: Optional[str] = None) -> Shipment:
    stmt = _scoped(select(Shipment).where(Shipment.id == shipment_id), owner_id)
    stmt = stmt.execution_options(populate_existing=True)
    shipment = db.execute(stmt).scalars().first()
    if shipment is None:
        raise NotFound("Shipment not found")
    return shipment


def find_by_tracking_number(db: Session, tracking_number: str) -> Optional[Shipment]:
    stmt = select(Shipment).where(Shipment.tracking_number == tracking_number.strip())
    return db.execute(stmt).scalars().first()


def find_by_tracking_number_or_id(db: Session, key: str) -> Shipment:
    """Public lookup: tracking number first, then internal id."""
    shipment = find_by_tracking_number(db, key) or db.get(Shipment, key)
    if shipment is None:
        raise NotFound("Shipment not found")
    return shipment


def list_events(db: Session, shipment_ids: Iterable[str]) -> dict:
    """Events grouped by shipment id, newest first within each group."""
    ids = list(shipment_ids)
    grouped = {sid: [] for sid in ids}
    if not ids:
        return grouped
    stmt = (
        select(TrackingEvent)
        .where(TrackingEvent.shipment_id.in_(ids))
        .order_by(TrackingEvent.timestamp.desc(), TrackingEvent.id)
    )
    for event in db.execute(stmt).scalars():
        grouped[event.shipment_id].append(event)
    return grouped


def replace_events(db: Session, shipment_id: str, events) -> None:
    """Delete every event of the shipment, then insert ``events``.

    Runs inside the caller's transaction, so readers never see the
    emptied list between the two statements.
    """
    db.execute(
        delete(TrackingEvent)
        .where(TrackingEvent.shipment_id == shipment_id)
        .execution_options(synchronize_session="fetch")
    )
    for ev in events:
        db.add(TrackingEvent(
            shipment_id=shipment_id,
            status=ev.status,
            description=ev.description or "",
            location=ev.location or None,
            timestamp=ev.timestamp or utcnow(),
        ))


def _assign(shipment: Shipment, values: dict) -> None:
    for column in SHIPMENT_WRITABLE_COLUMNS:
        if column in values:
            setattr(shipment, column, values[column])


def _flush(db: Session, tracking_number: Optional[str]) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error writing shipment {tracking_number!r}: {e.orig}")
        raise Conflict("A shipment with this tracking number already exists")


def create_shipment(db: Session, values: dict, events=None, owner_id: Optional[str] = None) -> Shipment:
    shipment = Shipment(user_id=owner_id)
    _assign(shipment, values)
    if shipment.tracking_progress is None:
        shipment.tracking_progress = "Pickup"
    db.add(shipment)
    _flush(db, shipment.tracking_number)
    if events:
        replace_events(db, shipment.id, events)
    db.commit()
    logger.info(f"Shipment created: {shipment.tracking_number} (id={shipment.id})")
    return shipment


def update_shipment(db: Session, shipment: Shipment, values: dict, events=None, owner_id=KEEP_OWNER) -> Shipment:
    """Apply field changes; ``events=None`` keeps the event list, a list replaces it."""
    _assign(shipment, values)
    if owner_id is not KEEP_OWNER:
        shipment.user_id = owner_id
    shipment.updated_at = utcnow()
    _flush(db, shipment.tracking_number)
    if events is not None:
        replace_events(db, shipment.id, events)
    db.commit()
    logger.info(f"Shipment updated: {shipment.tracking_number} (id={shipment.id}, events={'replaced' if events is not None else 'kept'})")
    return shipment


def delete_shipment(db: Session, shipment: Shipment) -> None:
    db.execute(delete(TrackingEvent).where(TrackingEvent.shipment_id == shipment.id))
    db.delete(shipment)
    db.commit()
    logger.info(f"Shipment deleted: {shipment.tracking_number} (id={shipment.id})")


def serialize_event(event: TrackingEvent) -> dict:
    return {
        "id": event.id,
        "shipment_id": event.shipment_id,
        "status": event.status,
        "description": event.description,
        "location": event.location,
        "timestamp": isoformat_utc(event.timestamp),
    }


def serialize_shipment(shipment: Shipment, events: Iterable[TrackingEvent]) -> dict:
    """snake_case dict of every column plus ordered ``events``."""
    row = {}
    for column in Shipment.__table__.columns:
        value = getattr(shipment, column.name)
        row[column.name] = isoformat_utc(value) if hasattr(value, "isoformat") else value
    row["events"] = [serialize_event(e) for e in events]
    return row


def load_shipment(db: Session, shipment_id: str, owner_id: Optional[str] = None) -> dict:
    """Canonical read: the stored row plus freshly ordered events."""
    shipment = get_shipment(db, shipment_id, owner_id)
    return serialize_shipment(shipment, list_events(db, [shipment.id])[shipment.id])


def load_shipments(db: Session, owner_id: Optional[str] = None) -> List[dict]:
    shipments = list_shipments(db, owner_id)
    events = list_events(db, [s.id for s in shipments])
    return [serialize_shipment(s, events[s.id]) for s in shipments]
