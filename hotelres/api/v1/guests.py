"""Guests CRUD API router."""

from fastapi import APIRouter, Depends, Query, status

from hotelres.api.deps import get_guest_service
from hotelres.schemas.common import ApiResponse
from hotelres.schemas.guest import Guest, GuestCreate, GuestUpdate
from hotelres.schemas.reservation import GuestDetail
from hotelres.services.guest_service import GuestService

router = APIRouter(prefix="/api/v1/guests", tags=["guests"])


@router.get(
    "",
    response_model=ApiResponse[list[Guest]],
    summary="List all guests",
)
async def list_guests(service: GuestService = Depends(get_guest_service)) -> ApiResponse:
    """Return every guest, most recently registered first."""
    return ApiResponse(data=await service.list_guests())


@router.get(
    "/search",
    response_model=ApiResponse[list[Guest]],
    summary="Search guests",
)
async def search_guests(
    query: str | None = Query(None, description="Matches name, email, phone or ID document (case-insensitive)"),
    service: GuestService = Depends(get_guest_service),
) -> ApiResponse:
    return ApiResponse(data=await service.search_guests(query))


@router.get(
    "/{guest_id}",
    response_model=ApiResponse[GuestDetail],
    summary="Get a guest with their reservations",
)
async def get_guest(
    guest_id: int,
    service: GuestService = Depends(get_guest_service),
) -> ApiResponse:
    return ApiResponse(data=await service.get_guest_detail(guest_id))


@router.post(
    "",
    response_model=ApiResponse[Guest],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new guest",
)
async def create_guest(
    body: GuestCreate,
    service: GuestService = Depends(get_guest_service),
) -> ApiResponse:
    """Register a guest. Email and ID document must not belong to another guest."""
    guest = await service.create_guest(**body.model_dump())
    return ApiResponse(data=guest, message="Guest created successfully")


@router.put(
    "/{guest_id}",
    response_model=ApiResponse[Guest],
    summary="Update a guest",
)
async def update_guest(
    guest_id: int,
    body: GuestUpdate,
    service: GuestService = Depends(get_guest_service),
) -> ApiResponse:
    """Partially update a guest. Only explicitly provided fields are changed."""
    guest = await service.update_guest(guest_id, body.model_dump(exclude_unset=True))
    return ApiResponse(data=guest, message="Guest updated successfully")


@router.delete(
    "/{guest_id}",
    response_model=ApiResponse[None],
    summary="Delete a guest",
)
async def delete_guest(
    guest_id: int,
    service: GuestService = Depends(get_guest_service),
) -> ApiResponse:
    """Delete a guest. Refused while the guest has active reservations."""
    await service.delete_guest(guest_id)
    return ApiResponse(message="Guest deleted successfully")
