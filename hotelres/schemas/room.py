"""Pydantic v2 schemas for rooms: request bodies and the room record."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hotelres.schemas.enums import RoomStatus

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RoomCreate(BaseModel):
    """Schema for adding a room to the catalog."""

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: Decimal | None = None
    capacity: int | None = None
    beds: int | None = None
    air_conditioning: bool = False
    status: RoomStatus = RoomStatus.AVAILABLE


class RoomUpdate(BaseModel):
    """Schema for partially updating a room. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = None
    capacity: int | None = None
    beds: int | None = None
    air_conditioning: bool | None = None
    status: RoomStatus | None = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Room(BaseModel):
    """A stored room."""

    id: int
    name: str
    description: str | None = None
    price: Decimal
    capacity: int
    beds: int
    air_conditioning: bool
    status: RoomStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
