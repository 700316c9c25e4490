"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, data?, message?, error?}`` wrapper around a payload."""

    success: bool = True
    data: T | None = None
    message: str | None = None
    error: str | None = None
