"""Pydantic v2 schemas for guests: request bodies and the guest record."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GuestCreate(BaseModel):
    """Schema for registering a guest.

    Required fields are checked by the guest service, not here, so that a
    missing field is reported the same way whichever caller omits it.
    """

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    id_document: str | None = Field(None, max_length=100)
    id_document_type: str | None = Field(None, max_length=50)


class GuestUpdate(BaseModel):
    """Schema for partially updating a guest. All fields optional."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=1, max_length=50)
    id_document: str | None = Field(None, min_length=1, max_length=100)
    id_document_type: str | None = Field(None, max_length=50)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Guest(BaseModel):
    """A stored guest."""

    id: int
    first_name: str
    last_name: str
    email: str | None = None
    phone: str
    id_document: str
    id_document_type: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
