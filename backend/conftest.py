from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parent
sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_WRITE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"

from tmsdb.database import Base  # noqa: E402
from tmsdb.apps.accounts import models as account_models  # noqa: E402
from tmsdb.apps.lookups import models as lookup_models  # noqa: E402,F401
from tmsdb.apps.participants import models as participant_models  # noqa: E402,F401
from tmsdb.apps.trainings import models as training_models  # noqa: E402,F401
from tmsdb.apps.enrollments import models as enrollment_models  # noqa: E402,F401
from tmsdb.apps.allowances import models as allowance_models  # noqa: E402,F401


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def staff_user(db_session) -> account_models.User:
    """An active back-office user for endpoints that stamp the acting user."""
    role = account_models.Role(name=account_models.RoleName.USER.value)
    user = account_models.User(
        email="clerk@example.com",
        hashed_password="hashed",
        first_name="Clerk",
        last_name="User",
        is_active=True,
    )
    user.roles = [role]
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user
