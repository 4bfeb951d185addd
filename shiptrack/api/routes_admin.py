import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiptrack.api import shipment_ops
from shiptrack.api.deps import get_db, require_admin
from shiptrack.api.schemas import ShipmentCreate, ShipmentWrite
from shiptrack.core.casing import to_camel
from shiptrack.core.errors import UpstreamError
from shiptrack.security.session import Principal
from shiptrack.services import users as user_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_admin)])  # main.py mounts at /api/admin

@router.get("/users")
def list_users(db: Session = Depends(get_db)) -> dict:
    try:
        users = user_service.list_customers(db)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch users: {e}")
        raise UpstreamError("Failed to fetch users")
    return {"success": True, "data": to_camel([user_service.serialize_user(u) for u in users])}

@router.get("/shipments")
def list_all_shipments(db: Session = Depends(get_db)) -> dict:
    return shipment_ops.list_shipments(db, None)

@router.post("/shipments", status_code=status.HTTP_201_CREATED)
def create_any_shipment(payload: ShipmentCreate, db: Session = Depends(get_db)) -> dict:
    return shipment_ops.create_shipment(db, payload, None, admin=True)

@router.get("/shipments/{shipment_id}")
def get_any_shipment(shipment_id: str, db: Session = Depends(get_db)) -> dict:
    return shipment_ops.get_shipment(db, shipment_id, None)

@router.put("/shipments/{shipment_id}")
def update_any_shipment(shipment_id: str, payload: ShipmentWrite, admin: Principal = Depends(require_admin), db: Session = Depends(get_db)) -> dict:
    logger.info(f"Admin {admin.email} updating shipment {shipment_id}")
    return shipment_ops.update_shipment(db, shipment_id, payload, None, admin=True)

@router.delete("/shipments/{shipment_id}")
def delete_any_shipment(shipment_id: str, admin: Principal = Depends(require_admin), db: Session = Depends(get_db)) -> dict:
    logger.info(f"Admin {admin.email} deleting shipment {shipment_id}")
    return shipment_ops.delete_shipment(db, shipment_id, None)
