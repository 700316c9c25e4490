"""Rooms CRUD and availability API router."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status

from hotelres.api.deps import get_room_service
from hotelres.schemas.common import ApiResponse
from hotelres.schemas.enums import RoomStatus
from hotelres.schemas.reservation import AvailabilityResult, RoomDetail
from hotelres.schemas.room import Room, RoomCreate, RoomUpdate
from hotelres.services.room_service import RoomService

router = APIRouter(prefix="/api/v1/rooms", tags=["rooms"])


@router.get(
    "",
    response_model=ApiResponse[list[Room]],
    summary="List rooms",
)
async def list_rooms(
    min_capacity: int | None = Query(None, ge=1, description="Rooms sleeping at least this many"),
    min_beds: int | None = Query(None, ge=1, description="Rooms with at least this many beds"),
    min_price: Decimal | None = Query(None, ge=0, description="Nightly price >= this"),
    max_price: Decimal | None = Query(None, ge=0, description="Nightly price <= this"),
    air_conditioning: bool | None = Query(None, description="Filter on the air-conditioning flag"),
    status_filter: RoomStatus | None = Query(None, alias="status", description="Filter by room status"),
    service: RoomService = Depends(get_room_service),
) -> ApiResponse:
    rooms = await service.list_rooms(
        min_capacity=min_capacity,
        min_beds=min_beds,
        min_price=min_price,
        max_price=max_price,
        air_conditioning=air_conditioning,
        status=status_filter,
    )
    return ApiResponse(data=rooms)


@router.get(
    "/available",
    response_model=ApiResponse[list[Room]],
    summary="List rooms that can be booked",
)
async def available_rooms(
    start_date: date | None = Query(None, description="Stay start (inclusive)"),
    end_date: date | None = Query(None, description="Stay end (exclusive)"),
    min_capacity: int | None = Query(None, ge=1),
    min_beds: int | None = Query(None, ge=1),
    max_price: Decimal | None = Query(None, ge=0),
    air_conditioning: bool | None = Query(None),
    service: RoomService = Depends(get_room_service),
) -> ApiResponse:
    """Rooms in service matching the filters, cheapest first, free over the dates if given."""
    rooms = await service.available_rooms(
        start_date=start_date,
        end_date=end_date,
        min_capacity=min_capacity,
        min_beds=min_beds,
        max_price=max_price,
        air_conditioning=air_conditioning,
    )
    return ApiResponse(data=rooms)


@router.get(
    "/{room_id}/availability",
    response_model=ApiResponse[AvailabilityResult],
    summary="Check one room's availability",
)
async def room_availability(
    room_id: int,
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    service: RoomService = Depends(get_room_service),
) -> ApiResponse:
    return ApiResponse(data=await service.room_availability(room_id, start_date, end_date))


@router.get(
    "/{room_id}",
    response_model=ApiResponse[RoomDetail],
    summary="Get a room with its reservations",
)
async def get_room(
    room_id: int,
    service: RoomService = Depends(get_room_service),
) -> ApiResponse:
    return ApiResponse(data=await service.get_room_detail(room_id))


@router.post(
    "",
    response_model=ApiResponse[Room],
    status_code=status.HTTP_201_CREATED,
    summary="Create a room",
)
async def create_room(
    body: RoomCreate,
    service: RoomService = Depends(get_room_service),
) -> ApiResponse:
    room = await service.create_room(**body.model_dump())
    return ApiResponse(data=room, message="Room created successfully")


@router.put(
    "/{room_id}",
    response_model=ApiResponse[Room],
    summary="Update a room",
)
async def update_room(
    room_id: int,
    body: RoomUpdate,
    service: RoomService = Depends(get_room_service),
) -> ApiResponse:
    """Partially update a room, including taking it out of service."""
    room = await service.update_room(room_id, body.model_dump(exclude_unset=True))
    return ApiResponse(data=room, message="Room updated successfully")


@router.delete(
    "/{room_id}",
    response_model=ApiResponse[None],
    summary="Delete a room",
)
async def delete_room(
    room_id: int,
    service: RoomService = Depends(get_room_service),
) -> ApiResponse:
    """Delete a room. Refused while it has active reservations."""
    await service.delete_room(room_id)
    return ApiResponse(message="Room deleted successfully")
