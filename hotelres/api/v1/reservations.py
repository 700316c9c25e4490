"""Reservations API router: booking lifecycle endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from hotelres.api.deps import get_reservation_service
from hotelres.schemas.common import ApiResponse
from hotelres.schemas.enums import ReservationStatus
from hotelres.schemas.reservation import (
    AvailabilityResult,
    Reservation,
    ReservationCreate,
    ReservationUpdate,
)
from hotelres.services.reservation_service import ReservationService

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])


@router.get(
    "",
    response_model=ApiResponse[list[Reservation]],
    summary="List reservations",
)
async def list_reservations(
    status_filter: ReservationStatus | None = Query(None, alias="status", description="Filter by status"),
    guest_name: str | None = Query(None, description="Guest first or last name contains this (case-insensitive)"),
    start_date: date | None = Query(None, description="Date filter lower bound"),
    end_date: date | None = Query(None, description="Date filter upper bound"),
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    """Return reservations newest first, joined with guest and room.

    The date filter matches stays inside the range and stays spanning it.
    """
    reservations = await service.list_reservations(
        status=status_filter,
        guest_name=guest_name,
        start_date=start_date,
        end_date=end_date,
    )
    return ApiResponse(data=reservations)


@router.get(
    "/check-availability",
    response_model=ApiResponse[AvailabilityResult],
    summary="Check availability for a date range",
)
async def check_availability(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    room_id: int | None = Query(None, ge=1, description="Limit the check to one room"),
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    return ApiResponse(data=await service.check_availability(start_date, end_date, room_id))


@router.get(
    "/{reservation_id}",
    response_model=ApiResponse[Reservation],
    summary="Get a reservation",
)
async def get_reservation(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    return ApiResponse(data=await service.get_reservation(reservation_id))


@router.post(
    "",
    response_model=ApiResponse[Reservation],
    status_code=status.HTTP_201_CREATED,
    summary="Book a room",
)
async def create_reservation(
    body: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    """Create a reservation in status RESERVED, priced at the room's nightly rate."""
    reservation = await service.create_reservation(**body.model_dump())
    return ApiResponse(data=reservation, message="Reservation created successfully")


@router.put(
    "/{reservation_id}",
    response_model=ApiResponse[Reservation],
    summary="Amend a reservation",
)
async def update_reservation(
    reservation_id: int,
    body: ReservationUpdate,
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    """Partially update a reservation.

    Date and room changes re-check availability and reprice the stay;
    status changes must follow the reservation lifecycle.
    """
    reservation = await service.amend_reservation(reservation_id, body.model_dump(exclude_unset=True))
    return ApiResponse(data=reservation, message="Reservation updated successfully")


@router.post(
    "/{reservation_id}/check-in",
    response_model=ApiResponse[Reservation],
    summary="Check a guest in",
)
async def check_in(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    reservation = await service.check_in(reservation_id)
    return ApiResponse(data=reservation, message="Guest checked in")


@router.post(
    "/{reservation_id}/check-out",
    response_model=ApiResponse[Reservation],
    summary="Check a guest out",
)
async def check_out(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    reservation = await service.check_out(reservation_id)
    return ApiResponse(data=reservation, message="Guest checked out")


@router.delete(
    "/{reservation_id}",
    response_model=ApiResponse[Reservation],
    summary="Cancel a reservation",
)
async def cancel_reservation(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service),
) -> ApiResponse:
    """Cancel a reservation. Completed stays cannot be cancelled."""
    reservation = await service.cancel_reservation(reservation_id)
    return ApiResponse(data=reservation, message="Reservation cancelled successfully")
