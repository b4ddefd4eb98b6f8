# backend/tmsdb/alembic/env.py

from __future__ import annotations

import os
import sys
from logging.config import fileConfig

from alembic import context

# ---------------------------------------------------------------------------
# PYTHONPATH SETUP
# ---------------------------------------------------------------------------
# __file__  = backend/tmsdb/alembic/env.py
# BASE_DIR  = backend/
# package   = tmsdb
# ---------------------------------------------------------------------------

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from tmsdb.database import Base, write_engine  # noqa: E402

# Register every table on Base.metadata.
from tmsdb.apps.accounts import models as accounts_models  # noqa: F401, E402
from tmsdb.apps.lookups import models as lookups_models  # noqa: F401, E402
from tmsdb.apps.participants import models as participants_models  # noqa: F401, E402
from tmsdb.apps.trainings import models as trainings_models  # noqa: F401, E402
from tmsdb.apps.enrollments import models as enrollments_models  # noqa: F401, E402
from tmsdb.apps.allowances import models as allowances_models  # noqa: F401, E402

target_metadata = Base.metadata


# ---------------------------------------------------------------------------
# URL RESOLUTION (offline)
# ---------------------------------------------------------------------------


def _resolve_offline_url() -> str:
    """
    Offline mode renders SQL without a connection, so it only needs a URL:
    sqlalchemy.url from alembic.ini unless that is the template placeholder,
    then the same env vars the application reads.
    """
    url = (config.get_main_option("sqlalchemy.url") or "").strip()
    if not url or url.startswith("driver://"):
        url = (os.getenv("DATABASE_WRITE_URL") or os.getenv("DATABASE_URL") or "").strip()

    if not url:
        raise RuntimeError(
            "No database URL found.\n"
            "Set sqlalchemy.url in alembic.ini OR set DATABASE_WRITE_URL / DATABASE_URL."
        )

    config.set_main_option("sqlalchemy.url", url)
    return url


# ---------------------------------------------------------------------------
# MIGRATIONS
# ---------------------------------------------------------------------------


def run_migrations_offline() -> None:
    context.configure(
        url=_resolve_offline_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Migrate through the application's write engine."""
    with write_engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            # SQLite cannot ALTER constraints in place.
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
