# backend/tmsdb/apps/participants/schemas.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from ...schemas import WireModel


def _blank_to_none(value):
    if isinstance(value, str) and value == "":
        return None
    return value


class ParticipantCreate(WireModel):
    title: str = Field("", max_length=10)
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    middlename: Optional[str] = Field(None, max_length=100)
    id_no: str = Field(..., min_length=1, max_length=20)
    sex: str = Field("", max_length=10)
    dob: datetime
    id_type: str = Field("", max_length=20)
    phone: str = Field("", max_length=15)
    email: Optional[EmailStr] = Field(None, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def _empty_email(cls, value):
        return _blank_to_none(value)


class ParticipantUpdate(WireModel):
    """
    Partial update. Null or empty-string values leave the stored column alone.
    """

    title: Optional[str] = Field(None, max_length=10)
    firstname: Optional[str] = Field(None, max_length=100)
    lastname: Optional[str] = Field(None, max_length=100)
    middlename: Optional[str] = Field(None, max_length=100)
    id_no: Optional[str] = Field(None, max_length=20)
    sex: Optional[str] = Field(None, max_length=10)
    dob: Optional[datetime] = None
    id_type: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=15)
    email: Optional[EmailStr] = Field(None, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def _empty_email(cls, value):
        return _blank_to_none(value)


class ParticipantRead(WireModel):
    id: int
    title: str
    firstname: str
    lastname: str
    middlename: Optional[str] = None
    id_no: str
    sex: str
    dob: datetime
    id_type: str
    phone: str
    email: str
    full_name: str
    created_at: datetime
    updated_at: datetime


class EnrollmentSummary(WireModel):
    id: int
    training_id: int
    training_program: str
    institution: str
    training_status: str
    start_date: datetime
    end_date: datetime


class ParticipantWithEnrollments(ParticipantRead):
    enrollments: List[EnrollmentSummary] = []
