# backend/tmsdb/apps/lookups/services.py

from __future__ import annotations

from typing import Callable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import get_live, not_deleted
from ...pagination import search_filter
from ...schemas import LookupRead
from ..allowances import models as allowance_models
from ..enrollments import models as enrollment_models
from . import models

# ---------------------------------------------------------------------------
# PROJECTIONS
# ---------------------------------------------------------------------------


def department_lookup(row: models.Department) -> LookupRead:
    return LookupRead(pk=row.pk, name=row.name, code=row.code, description=row.description)


def facility_lookup(row: models.Facility) -> LookupRead:
    return LookupRead(
        pk=row.pk,
        name=row.name,
        code=row.code,
        description=row.description,
        location=row.location,
    )


def designation_lookup(row: models.Designation) -> LookupRead:
    return LookupRead(
        pk=row.pk,
        name=row.title,
        code=row.code,
        description=row.description,
        title=row.title,
        level=row.level,
    )


def salary_scale_lookup(row: models.SalaryScale) -> LookupRead:
    return LookupRead(
        pk=row.pk,
        name=row.scale,
        code=row.grade,
        description=row.description,
        scale=row.scale,
        grade=row.grade,
        min_salary=row.min_salary,
        max_salary=row.max_salary,
    )


def sponsor_lookup(row: models.Sponsor) -> LookupRead:
    return LookupRead(
        pk=row.pk,
        name=row.name,
        code=row.type,
        description=row.description,
        type=row.type,
    )


def named_lookup(row) -> LookupRead:
    """Allowance types and statuses only have a name and a description."""
    return LookupRead(pk=row.pk, name=row.name, description=row.description)


def optional_lookup(row, projector: Callable) -> Optional[LookupRead]:
    """Project a nullable relation, hiding rows that have been soft-deleted."""
    if row is None or row.deleted:
        return None
    return projector(row)


# ---------------------------------------------------------------------------
# LISTS
# ---------------------------------------------------------------------------


def _lookup_list(
    db: Session,
    model,
    projector: Callable,
    *,
    order_by,
    search_columns,
    search_term: Optional[str],
) -> List[LookupRead]:
    q = db.query(model).filter(not_deleted(model))
    clause = search_filter(search_term, *search_columns)
    if clause is not None:
        q = q.filter(clause)
    return [projector(row) for row in q.order_by(order_by.asc()).all()]


def list_departments(db: Session, search_term: Optional[str] = None) -> List[LookupRead]:
    m = models.Department
    return _lookup_list(db, m, department_lookup, order_by=m.name, search_columns=(m.name, m.code), search_term=search_term)


def list_facilities(db: Session, search_term: Optional[str] = None) -> List[LookupRead]:
    m = models.Facility
    return _lookup_list(db, m, facility_lookup, order_by=m.name, search_columns=(m.name, m.code), search_term=search_term)


def list_designations(db: Session, search_term: Optional[str] = None) -> List[LookupRead]:
    m = models.Designation
    return _lookup_list(db, m, designation_lookup, order_by=m.title, search_columns=(m.title, m.code), search_term=search_term)


def list_salary_scales(db: Session, search_term: Optional[str] = None) -> List[LookupRead]:
    m = models.SalaryScale
    return _lookup_list(db, m, salary_scale_lookup, order_by=m.scale, search_columns=(m.scale, m.grade), search_term=search_term)


def list_sponsors(db: Session, search_term: Optional[str] = None) -> List[LookupRead]:
    m = models.Sponsor
    return _lookup_list(db, m, sponsor_lookup, order_by=m.name, search_columns=(m.name, m.type), search_term=search_term)


def list_allowance_types(db: Session, search_term: Optional[str] = None) -> List[LookupRead]:
    m = allowance_models.AllowanceType
    return _lookup_list(db, m, named_lookup, order_by=m.name, search_columns=(m.name, m.description), search_term=search_term)


def list_allowance_statuses(db: Session, search_term: Optional[str] = None) -> List[LookupRead]:
    m = allowance_models.AllowanceStatus
    return _lookup_list(db, m, named_lookup, order_by=m.name, search_columns=(m.name, m.description), search_term=search_term)


# ---------------------------------------------------------------------------
# DEPARTMENTS
# ---------------------------------------------------------------------------


def get_department(db: Session, department_id: int) -> Optional[models.Department]:
    return get_live(db, models.Department, department_id)


def _is_unique(db: Session, column, value: Optional[str], exclude_id: Optional[int]) -> bool:
    if not value:
        return True
    model = column.class_
    # Soft-deleted rows still hold their slot in the unique index.
    q = db.query(model).filter(func.lower(column) == value.strip().lower())
    if exclude_id is not None:
        q = q.filter(model.pk != exclude_id)
    return q.first() is None


def is_department_name_unique(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    return _is_unique(db, models.Department.name, name, exclude_id)


def is_department_code_unique(db: Session, code: Optional[str], exclude_id: Optional[int] = None) -> bool:
    return _is_unique(db, models.Department.code, code, exclude_id)


def department_has_enrollments(db: Session, department_id: int) -> bool:
    e = enrollment_models.ParticipantEnrollment
    return (
        db.query(e.pk)
        .filter(e.department_fk == department_id, not_deleted(e))
        .first()
        is not None
    )
