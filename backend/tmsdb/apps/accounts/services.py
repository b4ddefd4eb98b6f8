# backend/tmsdb/apps/accounts/services.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...security import create_access_token, get_password_hash, verify_password
from . import models, schemas

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class AuthenticationError(Exception):
    """Raised when login credentials are invalid or the account is inactive."""


class RegistrationError(Exception):
    """Raised when a new account cannot be created (e.g. duplicate email)."""


class PasswordChangeError(Exception):
    """Raised when the current password does not match."""


# ---------------------------------------------------------------------------
# Normalisation helpers
# ---------------------------------------------------------------------------


def _normalise_email(value: str) -> str:
    return value.strip().lower()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return (
        db.query(models.User)
        .filter(func.lower(models.User.email) == _normalise_email(email))
        .first()
    )


def ensure_roles(db: Session, names: Iterable[str]) -> list[models.Role]:
    """
    Return Role rows for `names`, creating any that do not exist yet.
    """
    wanted = [str(getattr(name, "value", name)) for name in names]
    existing = {
        role.name: role
        for role in db.query(models.Role).filter(models.Role.name.in_(wanted)).all()
    }
    roles = []
    for name in wanted:
        role = existing.get(name)
        if role is None:
            role = models.Role(name=name)
            db.add(role)
            existing[name] = role
        roles.append(role)
    db.flush()
    return roles


# ---------------------------------------------------------------------------
# Account lifecycle
# ---------------------------------------------------------------------------


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    date_of_birth: Optional[datetime] = None,
    roles: Iterable[str] = (models.DEFAULT_ROLE,),
) -> models.User:
    if get_user_by_email(db, email) is not None:
        raise RegistrationError("Email already exists")

    user = models.User(
        email=_normalise_email(email),
        hashed_password=get_password_hash(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        date_of_birth=date_of_birth,
        is_active=True,
    )
    user.roles = ensure_roles(db, roles)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register_user(db: Session, data: schemas.RegisterRequest) -> models.User:
    return create_user(
        db,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        date_of_birth=data.date_of_birth,
    )


def authenticate_user(db: Session, *, email: str, password: str) -> models.User:
    """
    Password login by email.

    The same error is raised for unknown, inactive and wrong-password cases
    so callers cannot disclose which accounts exist.
    """
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        logger.warning("Login failed", extra={"email": _normalise_email(email), "reason": "unknown_or_inactive"})
        raise AuthenticationError("Invalid email or password")

    if not verify_password(password, user.hashed_password):
        logger.warning("Login failed", extra={"email": user.email, "reason": "bad_password"})
        raise AuthenticationError("Invalid email or password")

    user.last_login_at = datetime.utcnow()
    db.commit()
    return user


def change_password(
    db: Session,
    *,
    user: models.User,
    current_password: str,
    new_password: str,
) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise PasswordChangeError("Current password is incorrect")
    user.hashed_password = get_password_hash(new_password)
    db.commit()


# ---------------------------------------------------------------------------
# Tokens and projections
# ---------------------------------------------------------------------------


def issue_access_token_for_user(user: models.User) -> Tuple[str, datetime]:
    """
    Create a JWT access token for the user.

    Returns (token_string, expires_at). The payload carries the user id,
    email, display name and role names.
    """
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.full_name,
        "roles": user.role_names,
    }
    return create_access_token(data=payload)


def user_to_read(user: models.User) -> schemas.UserRead:
    return schemas.UserRead(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        date_of_birth=user.date_of_birth,
        profile_picture_url=user.profile_picture_url,
        roles=user.role_names,
    )


def auth_response_for_user(user: models.User, message: str) -> schemas.AuthResponse:
    token, expires_at = issue_access_token_for_user(user)
    return schemas.AuthResponse(
        success=True,
        message=message,
        token=token,
        expires_at=expires_at,
        user=user_to_read(user),
    )
