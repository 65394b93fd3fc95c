# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Result types returned by resource operations.

Resource operations never raise for HTTP failures; they return an
:class:`ApiResponse` whose ``error`` field is set instead. Client-side argument
validation still raises :class:`~boltic_sdk.core.errors.ValidationError`.

Example::

    result = await client.tables.find_all({"limit": 10})
    if result.ok:
        for table in result.data:
            print(table["name"])
    else:
        print(result.error, result.details)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PaginationInfo:
    """
    Page position of a list result.

    :param current_page: One-based page index.
    :type current_page: int
    :param total_pages: Number of pages available.
    :type total_pages: int
    :param total_count: Number of items across all pages.
    :type total_count: int
    :param page_size: Items per page.
    :type page_size: int
    """

    current_page: int
    total_pages: int
    total_count: int
    page_size: int

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    @classmethod
    def from_api_response(cls, raw: Optional[Dict[str, Any]]) -> Optional["PaginationInfo"]:
        """
        Build from the API's pagination block.

        Accepts both the ``total_count/total_pages/current_page/per_page`` and the
        ``total/pages/page/limit`` spellings. Returns ``None`` when ``raw`` is empty.
        """
        if not raw:
            return None
        return cls(
            current_page=int(raw.get("current_page", raw.get("page", 1)) or 1),
            total_pages=int(raw.get("total_pages", raw.get("pages", 1)) or 1),
            total_count=int(raw.get("total_count", raw.get("total", 0)) or 0),
            page_size=int(raw.get("per_page", raw.get("limit", 0)) or 0),
        )


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """
    Outcome of a resource operation.

    :param data: Decoded payload on success.
    :param error: One-line error summary on failure.
    :type error: str or None
    :param details: Structured error details (``BolticError.to_dict()`` or the API error body).
    :param pagination: Page information for list operations.
    :type pagination: PaginationInfo or None
    """

    data: Optional[T] = None
    error: Optional[str] = None
    details: Any = None
    pagination: Optional[PaginationInfo] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DatabaseContext:
    """Database selected with ``BolticClient.use_database``."""

    database_id: str
    database_name: str


__all__ = ["ApiResponse", "PaginationInfo", "DatabaseContext"]
