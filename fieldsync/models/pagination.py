"""
Pagination models.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import Field

from .entities import FieldSyncModel

T = TypeVar("T")


class ListPage(FieldSyncModel, Generic[T]):
    """
    One page of a collection query.

    The backend wraps this in the usual `response` envelope:
    `{"response": {"cursor": 0, "results": [...], "remaining": 12, "count": 100}}`.
    """

    cursor: int = 0
    results: list[T] = Field(default_factory=list)
    remaining: int | None = None
    count: int | None = None

    def __len__(self) -> int:
        return len(self.results)
