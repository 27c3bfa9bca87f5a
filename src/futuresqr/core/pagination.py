from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationResult(BaseModel, Generic[T]):
    """Page of results together with the total count."""

    items: list[T] = Field(..., description="List of items in current page")
    total: int = Field(..., description="Total number of items across all pages", ge=0)
    limit: int = Field(..., description="Maximum items per page", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)

    @property
    def has_more(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.offset + len(self.items) < self.total


class SliceResult(BaseModel, Generic[T]):
    """Window of results without a total count.

    The store fetches one item past ``limit`` to learn whether more exist.
    """

    items: list[T] = Field(..., description="List of items in current slice")
    limit: int = Field(..., description="Maximum items per slice", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)
    has_next: bool = Field(..., description="Whether another slice follows")
