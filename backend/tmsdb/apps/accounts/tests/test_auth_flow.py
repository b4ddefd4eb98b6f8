from __future__ import annotations

import pytest
from fastapi import HTTPException, Response

from tmsdb import security
from tmsdb.apps.accounts import router as auth_router
from tmsdb.apps.accounts import schemas as account_schemas
from tmsdb.apps.accounts import services as account_services
from tmsdb.apps.accounts.models import RoleName


def _register(db_session, email: str = "nurse@example.com", password: str = "Secret1!"):
    response = Response()
    result = auth_router.register(
        account_schemas.RegisterRequest(
            email=email,
            password=password,
            confirm_password=password,
            first_name="Palesa",
            last_name="Mokoena",
        ),
        response=response,
        db=db_session,
    )
    return result, response


def test_register_issues_token_with_default_role(db_session):
    result, response = _register(db_session)

    assert result.success is True
    assert result.message == "Registration successful"
    assert result.user.roles == [RoleName.USER.value]
    assert response.headers["Location"] == "/api/auth/profile"

    claims = security.decode_access_token(result.token)
    assert claims["sub"] == str(result.user.id)
    assert claims["email"] == "nurse@example.com"
    assert claims["roles"] == ["User"]


def test_register_duplicate_email_fails(db_session):
    _register(db_session)

    with pytest.raises(HTTPException) as exc:
        _register(db_session, email="NURSE@example.com")
    assert exc.value.status_code == 400
    assert exc.value.detail == {"success": False, "message": "Email already exists"}


def test_register_requires_matching_confirmation():
    with pytest.raises(ValueError):
        account_schemas.RegisterRequest(
            email="x@example.com",
            password="Secret1!",
            confirm_password="Other1!",
            first_name="X",
            last_name="Y",
        )


def test_login_round_trip(db_session):
    _register(db_session)

    result = auth_router.login(
        account_schemas.LoginRequest(email="Nurse@Example.com", password="Secret1!"),
        db=db_session,
    )
    assert result.message == "Login successful"
    assert result.user.email == "nurse@example.com"
    assert result.expires_at is not None

    user = account_services.get_user_by_email(db_session, "nurse@example.com")
    assert user.last_login_at is not None


@pytest.mark.parametrize("email, password", [("nurse@example.com", "wrong"), ("ghost@example.com", "Secret1!")])
def test_login_failure_does_not_reveal_which_part_was_wrong(db_session, email, password):
    _register(db_session)

    with pytest.raises(HTTPException) as exc:
        auth_router.login(account_schemas.LoginRequest(email=email, password=password), db=db_session)
    assert exc.value.status_code == 401
    assert exc.value.detail["message"] == "Invalid email or password"


def test_inactive_user_cannot_log_in(db_session):
    _register(db_session)
    user = account_services.get_user_by_email(db_session, "nurse@example.com")
    user.is_active = False
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        auth_router.login(
            account_schemas.LoginRequest(email="nurse@example.com", password="Secret1!"),
            db=db_session,
        )
    assert exc.value.status_code == 401


def test_change_password(db_session):
    _register(db_session)
    user = account_services.get_user_by_email(db_session, "nurse@example.com")

    with pytest.raises(HTTPException) as exc:
        auth_router.change_password(
            account_schemas.ChangePasswordRequest(
                current_password="nope",
                new_password="Fresh2!",
                confirm_new_password="Fresh2!",
            ),
            db=db_session,
            current_user=user,
        )
    assert exc.value.detail["message"] == "Current password is incorrect"

    result = auth_router.change_password(
        account_schemas.ChangePasswordRequest(
            current_password="Secret1!",
            new_password="Fresh2!",
            confirm_new_password="Fresh2!",
        ),
        db=db_session,
        current_user=user,
    )
    assert result.message == "Password changed successfully"
    assert security.verify_password("Fresh2!", user.hashed_password)


def test_profile_logout_and_validate(db_session):
    _register(db_session)
    user = account_services.get_user_by_email(db_session, "nurse@example.com")

    assert auth_router.get_profile(current_user=user).full_name == "Palesa Mokoena"
    assert auth_router.logout(current_user=user).message == "Logout successful"

    validated = auth_router.validate_token(current_user=user)
    assert validated.message == "Token is valid"
    assert validated.user.id == user.id


def test_current_user_resolves_bearer_token(db_session):
    result, _ = _register(db_session)

    user = security.get_current_user(token=result.token, db=db_session)
    assert user.id == result.user.id
    assert security.get_current_active_user(current_user=user) is user


def test_tampered_token_is_rejected(db_session):
    result, _ = _register(db_session)

    with pytest.raises(HTTPException) as exc:
        security.get_current_user(token=result.token + "x", db=db_session)
    assert exc.value.status_code == 401
    assert exc.value.headers == {"WWW-Authenticate": "Bearer"}


def test_deactivated_user_is_blocked_after_login(db_session):
    _register(db_session)
    user = account_services.get_user_by_email(db_session, "nurse@example.com")
    user.is_active = False

    with pytest.raises(HTTPException) as exc:
        security.get_current_active_user(current_user=user)
    assert exc.value.status_code == 401
