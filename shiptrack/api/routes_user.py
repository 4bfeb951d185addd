from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shiptrack.api import shipment_ops
from shiptrack.api.deps import get_db, require_user
from shiptrack.api.schemas import ShipmentCreate, ShipmentWrite
from shiptrack.security.session import Principal

router = APIRouter()  # main.py mounts at /api/user

@router.get("/shipments")
def list_my_shipments(principal: Principal = Depends(require_user), db: Session = Depends(get_db)) -> dict:
    return shipment_ops.list_shipments(db, principal.user_id)

@router.post("/shipments", status_code=status.HTTP_201_CREATED)
def create_my_shipment(payload: ShipmentCreate, principal: Principal = Depends(require_user), db: Session = Depends(get_db)) -> dict:
    return shipment_ops.create_shipment(db, payload, principal.user_id)

@router.get("/shipments/{shipment_id}")
def get_my_shipment(shipment_id: str, principal: Principal = Depends(require_user), db: Session = Depends(get_db)) -> dict:
    return shipment_ops.get_shipment(db, shipment_id, principal.user_id)

@router.put("/shipments/{shipment_id}")
def update_my_shipment(shipment_id: str, payload: ShipmentWrite, principal: Principal = Depends(require_user), db: Session = Depends(get_db)) -> dict:
    return shipment_ops.update_shipment(db, shipment_id, payload, principal.user_id)

@router.delete("/shipments/{shipment_id}")
def delete_my_shipment(shipment_id: str, principal: Principal = Depends(require_user), db: Session = Depends(get_db)) -> dict:
    return shipment_ops.delete_shipment(db, shipment_id, principal.user_id)
