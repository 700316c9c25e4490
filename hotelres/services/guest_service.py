"""Guest registry — registration, lookup, search and removal of guests."""

import logging
from collections.abc import Mapping
from typing import Any

from hotelres.exceptions import DuplicateError, InvalidStateError, NotFoundError, ValidationError
from hotelres.schemas.guest import Guest
from hotelres.schemas.reservation import GuestDetail
from hotelres.services.availability_service import active
from hotelres.services.reservation_service import NEWEST_FIRST, join_reservations
from hotelres.store.base import DuplicateKeyError, Record, Store
from hotelres.store.query import any_of, contains, eq, ne

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "phone", "id_document")
UPDATABLE_FIELDS = frozenset(REQUIRED_FIELDS + ("email", "id_document_type"))
SEARCH_FIELDS = ("first_name", "last_name", "email", "phone", "id_document")
DEFAULT_ID_DOCUMENT_TYPE = "Passport"
DUPLICATE_MESSAGE = "A guest with this email or ID document already exists"


class GuestService:
    """CRUD over the guest collection."""

    def __init__(self, store: Store) -> None:
        self._store = store

    async def _load(self, guest_id: int) -> Record:
        record = await self._store.guests.get(guest_id)
        if record is None:
            raise NotFoundError("Guest not found")
        return record

    async def _ensure_unique(self, email: str | None, id_document: str | None, guest_id: int | None = None) -> None:
        if not email and not id_document:
            return
        clash = any_of(
            eq("email", email) if email else None,
            eq("id_document", id_document) if id_document else None,
        )
        if guest_id is not None:
            clash = clash & ne("id", guest_id)
        if await self._store.guests.exists(clash):
            raise DuplicateError(DUPLICATE_MESSAGE)

    async def create_guest(
        self,
        first_name: str | None,
        last_name: str | None,
        phone: str | None,
        id_document: str | None,
        email: str | None = None,
        id_document_type: str | None = None,
    ) -> Guest:
        """Register a new guest.

        First name, last name, phone and ID document are required; the
        document type defaults to a passport.
        """
        if not first_name or not last_name or not phone or not id_document:
            raise ValidationError("First name, last name, phone, and ID document are required")

        await self._ensure_unique(email, id_document)
        try:
            record = await self._store.guests.create(
                {
                    "first_name": first_name,
                    "last_name": last_name,
                    "email": email,
                    "phone": phone,
                    "id_document": id_document,
                    "id_document_type": id_document_type or DEFAULT_ID_DOCUMENT_TYPE,
                }
            )
        except DuplicateKeyError as exc:
            raise DuplicateError(DUPLICATE_MESSAGE) from exc

        logger.info("Guest %s registered", record["id"])
        return Guest.model_validate(record)

    async def get_guest(self, guest_id: int) -> Guest:
        return Guest.model_validate(await self._load(guest_id))

    async def get_guest_detail(self, guest_id: int) -> GuestDetail:
        """Return a guest together with every reservation they hold."""
        record = await self._load(guest_id)
        reservations = await self._store.reservations.find(eq("guest_id", guest_id), order_by=NEWEST_FIRST)
        return GuestDetail.model_validate(
            {**record, "reservations": await join_reservations(self._store, reservations)}
        )

    async def list_guests(self) -> list[Guest]:
        records = await self._store.guests.find(order_by=NEWEST_FIRST)
        return [Guest.model_validate(r) for r in records]

    async def search_guests(self, query: str | None) -> list[Guest]:
        """Case-insensitive substring search across names, contact and ID fields."""
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        query = query.strip()
        where = any_of(*(contains(field, query) for field in SEARCH_FIELDS))
        records = await self._store.guests.find(where, order_by=NEWEST_FIRST)
        return [Guest.model_validate(r) for r in records]

    async def update_guest(self, guest_id: int, changes: Mapping[str, Any]) -> Guest:
        """Partially update a guest. Only the given fields change."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown guest fields: {', '.join(sorted(unknown))}")
        for field in REQUIRED_FIELDS + ("id_document_type",):
            if field in changes and not changes[field]:
                raise ValidationError(f"{field} cannot be empty")

        await self._load(guest_id)
        await self._ensure_unique(changes.get("email"), changes.get("id_document"), guest_id)
        try:
            record = await self._store.guests.update(guest_id, dict(changes))
        except DuplicateKeyError as exc:
            raise DuplicateError(DUPLICATE_MESSAGE) from exc
        if record is None:
            raise NotFoundError("Guest not found")

        logger.info("Guest %s updated: %s", guest_id, sorted(changes))
        return Guest.model_validate(record)

    async def delete_guest(self, guest_id: int) -> None:
        """Delete a guest and their past reservations.

        Refused while the guest holds a reservation that is still reserved
        or checked in.
        """
        await self._load(guest_id)
        reservations = self._store.reservations
        if await reservations.exists(eq("guest_id", guest_id) & active()):
            raise InvalidStateError("Cannot delete guest with active reservations")

        for past in await reservations.find(eq("guest_id", guest_id)):
            await reservations.delete(past["id"])
        await self._store.guests.delete(guest_id)
        logger.info("Guest %s deleted", guest_id)
