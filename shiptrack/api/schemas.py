from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from shiptrack.core.casing import snake_to_camel_key
from shiptrack.core.clock import parse_iso, to_naive_utc
from shiptrack.presentation.timeline import parse_event_label

TrackingStage = Literal["Pickup", "Shipped", "In Transit", "Out for Delivery", "Delivered"]

class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown keys are rejected."""
    model_config = ConfigDict(
        alias_generator=snake_to_camel_key,
        populate_by_name=True,
        extra="forbid",
        coerce_numbers_to_str=True,
    )

# --- Auth ---
class RegisterPayload(WireModel):
    email: EmailStr
    password: str = Field(min_length=1)
    confirm_password: Optional[str] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self

class LoginPayload(WireModel):
    email: EmailStr
    password: str = Field(min_length=1)

class TrackRequest(WireModel):
    tracking_number: Optional[str] = None

# --- Shipments ---
class TrackingEventWrite(WireModel):
    status: str = Field(min_length=1, max_length=128)
    description: Optional[str] = ""
    location: Optional[str] = None
    timestamp: Optional[datetime] = None

    # Present on events echoed back from a read; never written
    id: Optional[Any] = Field(default=None, exclude=True)
    shipment_id: Optional[Any] = Field(default=None, exclude=True)

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, str):
            return parse_event_label(v)
        return v

    @field_validator("timestamp")
    @classmethod
    def store_as_utc(cls, v):
        return to_naive_utc(v) if v is not None else None

class ShipmentWrite(WireModel):
    tracking_number: Optional[str] = Field(default=None, min_length=1, max_length=64)
    order_reference_number: Optional[str] = None
    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    status_details: Optional[str] = None
    status_color: Optional[str] = None

    sender_name: Optional[str] = None
    origin_street_address: Optional[str] = None
    origin_city: Optional[str] = None
    origin_state: Optional[str] = None
    origin_country: Optional[str] = None
    origin_postal_code: Optional[str] = None
    origin: Optional[str] = None
    origin_latitude: Optional[float] = None
    origin_longitude: Optional[float] = None

    receiver_name: Optional[str] = None
    destination_street_address: Optional[str] = None
    destination_city: Optional[str] = None
    destination_state: Optional[str] = None
    destination_country: Optional[str] = None
    destination_postal_code: Optional[str] = None
    destination: Optional[str] = None
    destination_latitude: Optional[float] = None
    destination_longitude: Optional[float] = None

    weight: Optional[str] = None
    length: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    package_type: Optional[str] = None
    contents_description: Optional[str] = None
    declared_value: Optional[str] = None

    shipping_method: Optional[str] = None
    tracking_progress: Optional[TrackingStage] = None
    shipment_status: Optional[str] = None
    current_location: Optional[str] = None
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    description: Optional[str] = None
    estimated_delivery_date: Optional[datetime] = None
    shipment_date: Optional[datetime] = None
    insurance_details: Optional[str] = None

    special_instructions: Optional[str] = None
    return_instructions: Optional[str] = None
    customer_notes: Optional[str] = None

    # Owner assignment; only honoured in admin scope
    user_id: Optional[str] = Field(default=None, exclude=True)
    events: Optional[List[TrackingEventWrite]] = Field(default=None, exclude=True)

    # Form-only helpers and read-only fields: accepted, never persisted
    current_city: Optional[str] = Field(default=None, exclude=True)
    current_state: Optional[str] = Field(default=None, exclude=True)
    id: Optional[Any] = Field(default=None, exclude=True)
    created_at: Optional[Any] = Field(default=None, exclude=True)
    updated_at: Optional[Any] = Field(default=None, exclude=True)

    @field_validator("estimated_delivery_date", "shipment_date", mode="before")
    @classmethod
    def empty_date_is_absent(cls, v):
        # Timestamp columns reject ""
        if isinstance(v, str):
            return parse_iso(v) if v.strip() else None
        return v

    @field_validator("origin_latitude", "origin_longitude", "destination_latitude",
                     "destination_longitude", "current_latitude", "current_longitude", mode="before")
    @classmethod
    def empty_coordinate_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("tracking_number")
    @classmethod
    def strip_tracking_number(cls, v):
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Tracking number is required")
        return v

    @field_validator("tracking_progress")
    @classmethod
    def progress_is_a_stage(cls, v):
        # Runs only when the key is sent; omitting it keeps the stored stage
        if v is None:
            raise ValueError("Tracking progress must be one of the tracking stages")
        return v

    @property
    def assigns_owner(self) -> bool:
        return "user_id" in self.model_fields_set

    def column_values(self) -> dict:
        """Only the persisted columns the caller actually sent."""
        values = self.model_dump(exclude_unset=True)
        if values.get("tracking_number") is None:
            values.pop("tracking_number", None)
        return values

class ShipmentCreate(ShipmentWrite):
    tracking_number: str = Field(min_length=1, max_length=64)
