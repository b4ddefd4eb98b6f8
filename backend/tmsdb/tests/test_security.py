from __future__ import annotations

from datetime import timedelta

import bcrypt
import pytest
from jose import JWTError

from tmsdb import security
from tmsdb.apps.accounts import models as account_models
from tmsdb.apps.accounts.models import RoleName


def test_argon2_hash_round_trip():
    hashed = security.get_password_hash("Secret1!")

    assert hashed.startswith("$argon2")
    assert security.verify_password("Secret1!", hashed)
    assert not security.verify_password("secret1!", hashed)


def test_legacy_bcrypt_hashes_still_verify():
    legacy = bcrypt.hashpw(b"Admin123!", bcrypt.gensalt()).decode("utf-8")

    assert security.verify_password("Admin123!", legacy)
    assert not security.verify_password("Admin124!", legacy)


@pytest.mark.parametrize("hashed", ["", "plain-text", "$unknown$scheme"])
def test_unrecognised_hashes_never_verify(hashed):
    assert security.verify_password("anything", hashed) is False


def test_token_carries_claims_and_expiry():
    token, expires_at = security.create_access_token(
        data={"sub": "12", "roles": ["Admin"]},
        expires_delta=timedelta(minutes=5),
    )

    claims = security.decode_access_token(token)
    assert claims["sub"] == "12"
    assert claims["roles"] == ["Admin"]
    assert 0 < claims["exp"] - claims["iat"] <= 5 * 60 + 1
    assert expires_at is not None


def test_expired_token_is_rejected():
    token, _ = security.create_access_token(data={"sub": "1"}, expires_delta=timedelta(seconds=-10))

    with pytest.raises(JWTError):
        security.decode_access_token(token)


def test_require_roles_rejects_unknown_role_names():
    with pytest.raises(ValueError):
        security.require_roles("Superuser")


def test_admin_passes_any_role_check(db_session):
    admin = account_models.User(
        email="root@example.com",
        hashed_password="x",
        first_name="Root",
        last_name="Admin",
        is_active=True,
    )
    admin.roles = [account_models.Role(name=RoleName.ADMIN.value)]
    db_session.add(admin)
    db_session.commit()

    check = security.require_roles(RoleName.TRAINER)
    assert check(current_user=admin) is admin
