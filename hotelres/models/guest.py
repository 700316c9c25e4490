"""Guest model: people who stay at the hotel."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hotelres.database import Base, TimestampMixin


class Guest(TimestampMixin, Base):
    """A registered guest with contact and identity document details."""

    __tablename__ = "guests"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, default=None)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    id_document: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    id_document_type: Mapped[str] = mapped_column(String(50), default="Passport")

    def __repr__(self) -> str:
        return f"<Guest(id={self.id}, name={self.first_name!r} {self.last_name!r})>"
