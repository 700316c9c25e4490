"""Reservation model: a guest's stay in a room over a date range."""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hotelres.database import Base, TimestampMixin


class Reservation(TimestampMixin, Base):
    """A booking of one room by one guest for the half-open range [start_date, end_date)."""

    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    guest_id: Mapped[int] = mapped_column(
        ForeignKey("guests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[int] = mapped_column(
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    special_requests: Mapped[str | None] = mapped_column(Text, default=None)
    status: Mapped[str] = mapped_column(
        String(20),
        default="RESERVED",
        index=True,
    )  # RESERVED, CHECKED_IN, COMPLETED, CANCELLED

    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_reservations_dates_ordered"),
        Index("ix_reservations_room_dates", "room_id", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, room_id={self.room_id}, guest_id={self.guest_id}, status={self.status})>"
