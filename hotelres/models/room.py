"""Room model: the hotel's bookable inventory."""

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hotelres.database import Base, TimestampMixin


class Room(TimestampMixin, Base):
    """A single room with its nightly price and maintenance status."""

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    beds: Mapped[int] = mapped_column(Integer, nullable=False)
    air_conditioning: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(20), default="AVAILABLE", index=True)  # AVAILABLE, UNAVAILABLE

    __table_args__ = (CheckConstraint("price > 0", name="ck_rooms_price_positive"),)

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name={self.name!r}, status={self.status!r})>"
