# backend/tmsdb/apps/accounts/router.py

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import server_errors
from ...security import get_current_active_user
from . import models, schemas, services

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _failure(status_code: int, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"success": False, "message": message},
    )


@router.post(
    "/login",
    response_model=schemas.AuthResponse,
    summary="Authenticate with email and password and receive a bearer token",
)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    with server_errors("An error occurred during login", db):
        try:
            user = services.authenticate_user(db, email=payload.email, password=payload.password)
        except services.AuthenticationError as exc:
            raise _failure(status.HTTP_401_UNAUTHORIZED, str(exc))
        return services.auth_response_for_user(user, "Login successful")


@router.post(
    "/register",
    response_model=schemas.AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account with the default role",
)
def register(
    payload: schemas.RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred during registration", db):
        try:
            user = services.register_user(db, payload)
        except services.RegistrationError as exc:
            raise _failure(status.HTTP_400_BAD_REQUEST, str(exc))
        response.headers["Location"] = router.url_path_for("get_profile")
        return services.auth_response_for_user(user, "Registration successful")


@router.get(
    "/profile",
    response_model=schemas.UserRead,
    summary="Current user's profile",
)
def get_profile(current_user: models.User = Depends(get_current_active_user)):
    return services.user_to_read(current_user)


@router.post(
    "/change-password",
    response_model=schemas.AuthResponse,
    summary="Change the current user's password",
)
def change_password(
    payload: schemas.ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while changing password", db):
        try:
            services.change_password(
                db,
                user=current_user,
                current_password=payload.current_password,
                new_password=payload.new_password,
            )
        except services.PasswordChangeError as exc:
            raise _failure(status.HTTP_400_BAD_REQUEST, str(exc))
        return schemas.AuthResponse(success=True, message="Password changed successfully")


@router.post(
    "/logout",
    response_model=schemas.AuthResponse,
    summary="Log out (tokens are stateless; the client discards its copy)",
)
def logout(current_user: models.User = Depends(get_current_active_user)):
    return schemas.AuthResponse(success=True, message="Logout successful")


@router.get(
    "/validate-token",
    response_model=schemas.AuthResponse,
    summary="Check that the bearer token is still accepted",
)
def validate_token(current_user: models.User = Depends(get_current_active_user)):
    return schemas.AuthResponse(
        success=True,
        message="Token is valid",
        user=services.user_to_read(current_user),
    )
