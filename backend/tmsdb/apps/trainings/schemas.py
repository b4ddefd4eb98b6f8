# backend/tmsdb/apps/trainings/schemas.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ...schemas import WireModel

# ---------------------------------------------------------------------------
# TRAININGS
# ---------------------------------------------------------------------------


class TrainingCreate(WireModel):
    institution: str = Field(..., min_length=1, max_length=200)
    program: str = Field(..., min_length=1, max_length=200)
    country_of_study: str = Field(..., min_length=1, max_length=100)
    start_date: datetime
    end_date: datetime
    duration: int = Field(..., ge=1, le=240)

    departure_date: Optional[datetime] = None
    arrival_date: Optional[datetime] = None
    vacation_employment_period: Optional[str] = Field(None, max_length=100)
    resumption_date: Optional[datetime] = None
    extension_period: Optional[str] = Field(None, max_length=100)
    date_bond_signed: Optional[datetime] = None
    bond_serving_period: Optional[str] = Field(None, max_length=100)
    sponsor_fk: Optional[int] = None

    mode_of_study: str = Field(..., min_length=1, max_length=50)
    training_status: str = Field(..., min_length=1, max_length=50)
    financial_year: str = Field(..., min_length=1, max_length=20)
    campus_type: str = Field(..., min_length=1, max_length=50)


class TrainingUpdate(WireModel):
    institution: Optional[str] = Field(None, max_length=200)
    program: Optional[str] = Field(None, max_length=200)
    country_of_study: Optional[str] = Field(None, max_length=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=1, le=240)

    departure_date: Optional[datetime] = None
    arrival_date: Optional[datetime] = None
    vacation_employment_period: Optional[str] = Field(None, max_length=100)
    resumption_date: Optional[datetime] = None
    extension_period: Optional[str] = Field(None, max_length=100)
    date_bond_signed: Optional[datetime] = None
    bond_serving_period: Optional[str] = Field(None, max_length=100)
    sponsor_fk: Optional[int] = None

    mode_of_study: Optional[str] = Field(None, max_length=50)
    training_status: Optional[str] = Field(None, max_length=50)
    financial_year: Optional[str] = Field(None, max_length=20)
    campus_type: Optional[str] = Field(None, max_length=50)


class TrainingRead(WireModel):
    id: int
    institution: str
    program: str
    country_of_study: str
    start_date: datetime
    end_date: datetime
    duration: int
    departure_date: Optional[datetime] = None
    arrival_date: Optional[datetime] = None
    vacation_employment_period: Optional[str] = None
    resumption_date: Optional[datetime] = None
    extension_period: Optional[str] = None
    date_bond_signed: Optional[datetime] = None
    bond_serving_period: Optional[str] = None
    sponsor_fk: Optional[int] = None
    mode_of_study: str
    registration_date: datetime
    training_status: str
    financial_year: str
    campus_type: str
    created_at: datetime
    updated_at: datetime


class TrainingParticipantSummary(WireModel):
    id: int
    full_name: str
    id_no: str
    email: str
    phone: str
    enrollment_date: datetime


class TrainingWithParticipants(TrainingRead):
    participants: List[TrainingParticipantSummary] = []


# ---------------------------------------------------------------------------
# TRANSFERS
# ---------------------------------------------------------------------------


class TransferCreate(WireModel):
    participant_fk: int
    training_fk: int
    start_date: datetime
    end_date: datetime
    institution: str = Field(..., min_length=1, max_length=200)
    country: str = Field(..., min_length=1, max_length=100)
    transfer_reason: Optional[str] = Field(None, max_length=500)
    transfer_status: str = Field("", max_length=50)


class TransferRead(WireModel):
    pk: int
    participant_fk: int
    training_fk: int
    start_date: datetime
    end_date: datetime
    institution: str
    country: str
    transfer_reason: Optional[str] = None
    transfer_status: str
    participant_name: Optional[str] = None
    training_program: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str
