# backend/tmsdb/schemas.py
"""
Shared response shapes.

The API speaks camelCase JSON. Field names stay snake_case in Python and
are aliased on the wire; `_fk` suffixes keep their upper-case form
(`participant_fk` -> `participantFK`) so existing clients keep working.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def to_wire_name(field_name: str) -> str:
    name = to_camel(field_name)
    if name.endswith("Fk"):
        name = name[:-2] + "FK"
    return name


def to_naive_utc(value: Any) -> Any:
    """
    Offset-aware datetimes (`...Z`, `+02:00`) become naive UTC, the form
    every `DateTime` column stores. Anything else passes through.
    """
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class WireModel(BaseModel):
    """Base for every request and response schema."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_wire_name

    @field_validator("*", mode="after")
    @classmethod
    def _store_naive_utc(cls, value: Any) -> Any:
        return to_naive_utc(value)


# -------------------------------------------------------------------
# COMMON RESPONSES
# -------------------------------------------------------------------


class MessageResponse(WireModel):
    message: str


class AuditRead(WireModel):
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str


class LookupRead(WireModel):
    """
    Flat projection used by every dropdown / searchable select.

    Only `pk` and `name` are always populated; the remaining fields are
    filled from whichever columns the source table has.
    """

    pk: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    title: Optional[str] = None
    level: Optional[str] = None
    scale: Optional[str] = None
    grade: Optional[str] = None
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    type: Optional[str] = None
    location: Optional[str] = None


# -------------------------------------------------------------------
# PAGINATION ENVELOPES
# -------------------------------------------------------------------


class PaginatedResponse(WireModel, Generic[T]):
    """Envelope with `totalCount` (allowances, enrollments, lookups)."""

    data: List[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class PagedList(WireModel, Generic[T]):
    """Envelope with `total` (participants, trainings)."""

    data: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
