# backend/tmsdb/__init__.py
"""
Import ORM models from each app so that:

- Alembic and Base.metadata.create_all() see all tables.
- String relationship targets ("Participant", "Sponsor", ...) resolve no
  matter which app is imported first.

The model classes themselves live in tmsdb/apps/*/models.py.
"""

from .apps.accounts import models as accounts_models          # users / roles
from .apps.lookups import models as lookups_models            # departments, facilities, ...
from .apps.participants import models as participants_models  # participants + next of kin
from .apps.trainings import models as trainings_models        # trainings, transfers, budgets, reports
from .apps.enrollments import models as enrollments_models    # enrollments, bonds
from .apps.allowances import models as allowances_models      # allowances + types / statuses

__all__ = [
    "accounts_models",
    "lookups_models",
    "participants_models",
    "trainings_models",
    "enrollments_models",
    "allowances_models",
]
