# backend/tmsdb/apps/allowances/models.py

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ...database import Base
from ...models import AuditMixin


class AllowanceType(AuditMixin, Base):
    """What an allowance pays for (tuition, book allowance, transport, ...)."""

    __tablename__ = "allowance_types"

    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(String(500), nullable=True)

    allowances = relationship("Allowance", back_populates="allowance_type", passive_deletes="all")


class AllowanceStatus(AuditMixin, Base):
    """Payment workflow state (pending, approved, paid, ...)."""

    __tablename__ = "allowance_statuses"

    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(String(500), nullable=True)

    allowances = relationship("Allowance", back_populates="allowance_status", passive_deletes="all")


def _restrict_fk(table: str) -> Column:
    return Column(
        Integer,
        ForeignKey(f"{table}.pk", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )


class Allowance(AuditMixin, Base):
    """
    A payment to a participant for a training over a date range.
    """

    __tablename__ = "allowances"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_allowances_amount_positive"),
        CheckConstraint("end_date > start_date", name="ck_allowances_date_order"),
    )

    amount = Column(Numeric(18, 2), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    comments = Column(String(1000), nullable=True)

    training_fk = _restrict_fk("trainings")
    status_fk = _restrict_fk("allowance_statuses")
    participant_fk = _restrict_fk("participants")
    allowance_type_fk = _restrict_fk("allowance_types")

    training = relationship("Training", back_populates="allowances")
    allowance_status = relationship("AllowanceStatus", back_populates="allowances")
    participant = relationship("Participant", back_populates="allowances")
    allowance_type = relationship("AllowanceType", back_populates="allowances")
