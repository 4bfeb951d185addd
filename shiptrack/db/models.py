from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Float, Boolean, DateTime, ForeignKey
from datetime import datetime
from typing import Optional
import uuid
from shiptrack.core.clock import utcnow
from shiptrack.db.session import Base

def new_id() -> str:
    return str(uuid.uuid4())

class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)  # bcrypt hash
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow, onupdate=utcnow)

    shipments = relationship("Shipment", back_populates="user")

class Shipment(Base):
    __tablename__ = "shipments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    tracking_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    order_reference_number: Mapped[Optional[str]] = mapped_column(String(128))
    customer_name: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone_number: Mapped[Optional[str]] = mapped_column(String(64))
    status_details: Mapped[Optional[str]] = mapped_column(Text)
    status_color: Mapped[Optional[str]] = mapped_column(String(32))

    # Origin address
    sender_name: Mapped[Optional[str]] = mapped_column(String(255))
    origin_street_address: Mapped[Optional[str]] = mapped_column(String(255))
    origin_city: Mapped[Optional[str]] = mapped_column(String(120))
    origin_state: Mapped[Optional[str]] = mapped_column(String(120))
    origin_country: Mapped[Optional[str]] = mapped_column(String(120))
    origin_postal_code: Mapped[Optional[str]] = mapped_column(String(32))
    origin: Mapped[Optional[str]] = mapped_column(String(512))
    origin_latitude: Mapped[Optional[float]] = mapped_column(Float)
    origin_longitude: Mapped[Optional[float]] = mapped_column(Float)

    # Destination address
    receiver_name: Mapped[Optional[str]] = mapped_column(String(255))
    destination_street_address: Mapped[Optional[str]] = mapped_column(String(255))
    destination_city: Mapped[Optional[str]] = mapped_column(String(120))
    destination_state: Mapped[Optional[str]] = mapped_column(String(120))
    destination_country: Mapped[Optional[str]] = mapped_column(String(120))
    destination_postal_code: Mapped[Optional[str]] = mapped_column(String(32))
    destination: Mapped[Optional[str]] = mapped_column(String(512))
    destination_latitude: Mapped[Optional[float]] = mapped_column(Float)
    destination_longitude: Mapped[Optional[float]] = mapped_column(Float)

    # Package details
    weight: Mapped[Optional[str]] = mapped_column(String(32))
    length: Mapped[Optional[str]] = mapped_column(String(32))
    width: Mapped[Optional[str]] = mapped_column(String(32))
    height: Mapped[Optional[str]] = mapped_column(String(32))
    package_type: Mapped[Optional[str]] = mapped_column(String(64))
    contents_description: Mapped[Optional[str]] = mapped_column(Text)
    declared_value: Mapped[Optional[str]] = mapped_column(String(32))

    # Shipping details
    shipping_method: Mapped[Optional[str]] = mapped_column(String(64))
    tracking_progress: Mapped[str] = mapped_column(String(32), default="Pickup", server_default="Pickup", nullable=False)
    shipment_status: Mapped[Optional[str]] = mapped_column(String(128))
    current_location: Mapped[Optional[str]] = mapped_column(String(512))
    current_latitude: Mapped[Optional[float]] = mapped_column(Float)
    current_longitude: Mapped[Optional[float]] = mapped_column(Float)
    description: Mapped[Optional[str]] = mapped_column(Text)
    estimated_delivery_date: Mapped[Optional[datetime]] = mapped_column(DateTime())
    shipment_date: Mapped[Optional[datetime]] = mapped_column(DateTime())
    insurance_details: Mapped[Optional[str]] = mapped_column(Text)

    # Additional information
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)
    return_instructions: Mapped[Optional[str]] = mapped_column(Text)
    customer_notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="shipments")
    events = relationship(
        "TrackingEvent",
        back_populates="shipment",
        cascade="all, delete-orphan",
        order_by="TrackingEvent.timestamp.desc()",
    )

class TrackingEvent(Base):
    __tablename__ = "tracking_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    shipment_id: Mapped[str] = mapped_column(ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(512))
    timestamp: Mapped[datetime] = mapped_column(DateTime(), default=utcnow, nullable=False, index=True)

    shipment = relationship("Shipment", back_populates="events")

# Columns a client may write; everything else is server-managed
SHIPMENT_WRITABLE_COLUMNS = tuple(
    c.name for c in Shipment.__table__.columns
    if c.name not in ("id", "user_id", "created_at", "updated_at")
)
