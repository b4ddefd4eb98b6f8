# backend/tmsdb/apps/lookups/schemas.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ...schemas import LookupRead, WireModel


class LookupCatalog(WireModel):
    """Every dropdown list in one payload (`GET /api/lookup/all`)."""

    departments: List[LookupRead]
    facilities: List[LookupRead]
    designations: List[LookupRead]
    salary_scales: List[LookupRead]
    sponsors: List[LookupRead]
    allowance_types: List[LookupRead]
    allowance_statuses: List[LookupRead]


# ---------------------------------------------------------------------------
# DEPARTMENTS
# ---------------------------------------------------------------------------


class DepartmentCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=10)
    description: Optional[str] = Field(None, max_length=500)


class DepartmentUpdate(WireModel):
    name: Optional[str] = Field(None, max_length=100)
    code: Optional[str] = Field(None, max_length=10)
    description: Optional[str] = Field(None, max_length=500)


class DepartmentRead(WireModel):
    pk: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str
