# backend/tmsdb/apps/enrollments/schemas.py

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ...schemas import LookupRead, WireModel


class EnrollmentCreate(WireModel):
    # Participant and training
    participant_fk: int
    training_fk: int

    # Employment
    designation_fk: Optional[int] = None
    salary_scale_fk: Optional[int] = None
    department_fk: Optional[int] = None
    facility_fk: Optional[int] = None
    payroll_date: Optional[datetime] = None
    study_leave_date: Optional[datetime] = None
    allowance_stoppage_date: Optional[datetime] = None

    # Study
    start_date: datetime
    end_date: datetime
    duration: int = Field(..., ge=1, le=240)
    needing_travel: bool = False
    departure_date: Optional[datetime] = None
    arrival_date: Optional[datetime] = None

    # Bond
    date_bond_signed: Optional[datetime] = None
    bond_serving_period: Optional[str] = Field(None, max_length=50)

    # Others
    sponsor_fk: Optional[int] = None
    mode_of_study: str = Field("", max_length=50)
    registration_date: Optional[datetime] = None
    training_status: str = Field("", max_length=50)
    financial_year: str = Field("", max_length=20)
    campus_type: str = Field("", max_length=50)


class EnrollmentUpdate(WireModel):
    participant_fk: Optional[int] = None
    training_fk: Optional[int] = None

    designation_fk: Optional[int] = None
    salary_scale_fk: Optional[int] = None
    department_fk: Optional[int] = None
    facility_fk: Optional[int] = None
    payroll_date: Optional[datetime] = None
    study_leave_date: Optional[datetime] = None
    allowance_stoppage_date: Optional[datetime] = None

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=1, le=240)
    needing_travel: Optional[bool] = None
    departure_date: Optional[datetime] = None
    arrival_date: Optional[datetime] = None

    date_bond_signed: Optional[datetime] = None
    bond_serving_period: Optional[str] = Field(None, max_length=50)

    sponsor_fk: Optional[int] = None
    mode_of_study: Optional[str] = Field(None, max_length=50)
    registration_date: Optional[datetime] = None
    training_status: Optional[str] = Field(None, max_length=50)
    financial_year: Optional[str] = Field(None, max_length=20)
    campus_type: Optional[str] = Field(None, max_length=50)


class ParticipantSummary(WireModel):
    pk: int
    title: str
    firstname: str
    lastname: str
    middlename: Optional[str] = None
    id_no: str
    email: str
    phone: str
    full_name: str


class TrainingSummary(WireModel):
    pk: int
    institution: str
    program: str
    country_of_study: str
    start_date: datetime
    end_date: datetime
    duration: int
    financial_year: str


class EnrollmentRead(WireModel):
    pk: int
    participant_fk: int
    training_fk: int

    designation_fk: Optional[int] = None
    salary_scale_fk: Optional[int] = None
    department_fk: Optional[int] = None
    facility_fk: Optional[int] = None
    payroll_date: Optional[datetime] = None
    study_leave_date: Optional[datetime] = None
    allowance_stoppage_date: Optional[datetime] = None

    start_date: datetime
    end_date: datetime
    duration: int
    needing_travel: bool
    departure_date: Optional[datetime] = None
    arrival_date: Optional[datetime] = None

    date_bond_signed: Optional[datetime] = None
    bond_serving_period: Optional[str] = None

    sponsor_fk: Optional[int] = None
    mode_of_study: str
    registration_date: datetime
    training_status: str
    financial_year: str
    campus_type: str

    created_at: datetime
    created_by: str
    updated_at: datetime
    updated_by: str

    participant: Optional[ParticipantSummary] = None
    training: Optional[TrainingSummary] = None
    designation: Optional[LookupRead] = None
    salary_scale: Optional[LookupRead] = None
    department: Optional[LookupRead] = None
    facility: Optional[LookupRead] = None
    sponsor: Optional[LookupRead] = None
