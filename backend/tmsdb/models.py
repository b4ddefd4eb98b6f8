# backend/tmsdb/models.py
"""
Shared model building blocks.

Every domain table carries the same audit columns and soft-delete flag.
Domain models live in tmsdb.apps.<app>.models and mix in `AuditMixin`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, String, false

SYSTEM_ACTOR = "System"


class AuditMixin:
    """
    Primary key, audit stamps and the soft-delete flag.

    `created_by` / `updated_by` hold a display name rather than a user FK so
    that reference data loaded by seed scripts can be stamped "System".
    """

    pk = Column(Integer, primary_key=True, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    created_by = Column(String(100), nullable=False, default=SYSTEM_ACTOR)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_by = Column(String(100), nullable=False, default=SYSTEM_ACTOR)

    deleted = Column(Boolean, nullable=False, default=False, server_default=false())

    def stamp_created(self, actor: Optional[str] = None) -> None:
        now = datetime.utcnow()
        self.created_at = now
        self.updated_at = now
        self.created_by = actor or SYSTEM_ACTOR
        self.updated_by = actor or SYSTEM_ACTOR

    def stamp_updated(self, actor: Optional[str] = None) -> None:
        self.updated_at = datetime.utcnow()
        self.updated_by = actor or SYSTEM_ACTOR

    def soft_delete(self, actor: Optional[str] = None) -> None:
        self.deleted = True
        self.stamp_updated(actor)


def not_deleted(model):
    """Filter clause selecting live (not soft-deleted) rows of `model`."""
    return model.deleted.is_(False)


def get_live(db, model, pk: int):
    """
    Load a row by primary key, treating soft-deleted rows as missing.
    """
    row = db.get(model, pk)
    if row is None or row.deleted:
        return None
    return row
