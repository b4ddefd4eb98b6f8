# backend/tmsdb/apps/lookups/models.py
"""
Reference data used by enrollment forms.

Each table is small and read-mostly; enrollments point at them with
nullable foreign keys that fall back to NULL when a row is removed.
"""

from __future__ import annotations

from sqlalchemy import Column, Numeric, String

from ...database import Base
from ...models import AuditMixin


class Department(AuditMixin, Base):
    __tablename__ = "departments"

    name = Column(String(100), nullable=False, unique=True, index=True)
    code = Column(String(10), nullable=True, unique=True, index=True)
    description = Column(String(500), nullable=True)


class Facility(AuditMixin, Base):
    __tablename__ = "facilities"

    name = Column(String(150), nullable=False, index=True)
    code = Column(String(10), nullable=True, unique=True, index=True)
    location = Column(String(100), nullable=True)
    description = Column(String(500), nullable=True)


class Designation(AuditMixin, Base):
    __tablename__ = "designations"

    title = Column(String(100), nullable=False, index=True)
    code = Column(String(10), nullable=True, unique=True, index=True)
    level = Column(String(50), nullable=True)
    description = Column(String(500), nullable=True)


class SalaryScale(AuditMixin, Base):
    __tablename__ = "salary_scales"

    scale = Column(String(20), nullable=False, unique=True, index=True)
    grade = Column(String(50), nullable=True)
    min_salary = Column(Numeric(18, 2), nullable=True)
    max_salary = Column(Numeric(18, 2), nullable=True)
    description = Column(String(500), nullable=True)


class Sponsor(AuditMixin, Base):
    __tablename__ = "sponsors"

    name = Column(String(100), nullable=False, index=True)
    type = Column(String(20), nullable=True)
    contact_person = Column(String(100), nullable=True)
    email = Column(String(100), nullable=True, index=True)
    phone = Column(String(15), nullable=True)
    description = Column(String(500), nullable=True)
