"""Response envelopes shared by every route."""

from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard envelope; ``code`` is 0 on success, the HTTP status otherwise."""

    code: int = Field(default=0, description="Response code, 0 for success")
    message: str = Field(default="success", description="Response message")
    data: T | None = Field(default=None, description="Response data")


class PaginationParams(BaseModel):
    """Pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number")
    page_size: int = Field(default=20, ge=1, le=100, description="Items per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def window(self, items: Sequence[T]) -> list[T]:
        """Items on this page; empty past the last page."""
        return list(items[self.offset : self.offset + self.page_size])


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of an ordered collection plus its full size."""

    code: int = Field(default=0, description="Response code")
    message: str = Field(default="success", description="Response message")
    data: list[T] = Field(default_factory=list, description="Items on this page")
    total: int = Field(default=0, ge=0, description="Size of the whole collection")
    page: int = Field(default=1, ge=1, description="Current page")
    page_size: int = Field(default=20, ge=1, le=100, description="Page size")

    @classmethod
    def of(cls, items: Sequence[T], params: PaginationParams) -> "PaginatedResponse[T]":
        return cls(
            data=params.window(items),
            total=len(items),
            page=params.page,
            page_size=params.page_size,
        )
