# backend/tmsdb/apps/allowances/schemas.py

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ...schemas import WireModel

# ---------------------------------------------------------------------------
# ALLOWANCE TYPES / STATUSES
# ---------------------------------------------------------------------------


class AllowanceTypeCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class AllowanceTypeUpdate(WireModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class AllowanceStatusCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)


class AllowanceStatusUpdate(WireModel):
    name: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=500)


class NamedLookupRead(WireModel):
    pk: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str


class NamedLookupEntity(NamedLookupRead):
    """The stored row as-is, soft-delete flag included."""

    deleted: bool


# ---------------------------------------------------------------------------
# ALLOWANCES
# ---------------------------------------------------------------------------


class AllowanceCreate(WireModel):
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    start_date: datetime
    end_date: datetime
    comments: Optional[str] = Field(None, max_length=1000)
    training_fk: int
    status_fk: int
    participant_fk: int
    allowance_type_fk: int


class AllowanceUpdate(WireModel):
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=18, decimal_places=2)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    comments: Optional[str] = Field(None, max_length=1000)
    training_fk: Optional[int] = None
    status_fk: Optional[int] = None
    participant_fk: Optional[int] = None
    allowance_type_fk: Optional[int] = None


class ParticipantLookup(WireModel):
    pk: int
    first_name: str
    last_name: str
    email: Optional[str] = None


class TrainingLookup(WireModel):
    pk: int
    title: str
    program: Optional[str] = None
    venue: Optional[str] = None


class AllowanceTypeLookup(WireModel):
    pk: int
    name: str
    description: Optional[str] = None


class AllowanceStatusLookup(WireModel):
    pk: int
    name: str
    description: Optional[str] = None


class AllowanceRead(WireModel):
    pk: int
    amount: float
    start_date: datetime
    end_date: datetime
    comments: Optional[str] = None
    training_fk: int
    status_fk: int
    participant_fk: int
    allowance_type_fk: int
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str

    participant: Optional[ParticipantLookup] = None
    training: Optional[TrainingLookup] = None
    allowance_type: Optional[AllowanceTypeLookup] = None
    allowance_status: Optional[AllowanceStatusLookup] = None


class ParticipantAllowanceTotal(WireModel):
    participant_id: int
    total: float
