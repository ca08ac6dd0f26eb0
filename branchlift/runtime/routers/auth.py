"""Signup, login, logout and session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from branchlift.runtime.deps import Context
from branchlift.runtime.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError
from branchlift.runtime.models.account import Account
from branchlift.runtime.models.api import (
    AccountResponse,
    LoginRequest,
    PasswordCheckRequest,
    PasswordStrengthResponse,
    SessionResponse,
    SignupRequest,
)
from branchlift.runtime.password import check_password

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/password-strength", response_model=PasswordStrengthResponse)
async def password_strength(body: PasswordCheckRequest) -> PasswordStrengthResponse:
    """Evaluate each password rule, for live form feedback."""
    strength = check_password(body.password)
    return PasswordStrengthResponse(
        has_length=strength.has_length,
        has_upper=strength.has_upper,
        has_digit=strength.has_digit,
        is_strong=strength.is_strong,
    )


@router.post("/signup", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, context: Context) -> Account:
    """Register a new account and log it in."""
    try:
        return await context.signup(body.name, body.email, body.password, body.confirm_password)
    except ValidationError as exc:
        raise HTTPException(422, detail=str(exc)) from None
    except DuplicateEmailError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(exc)) from None


@router.post("/login", response_model=AccountResponse)
async def login(body: LoginRequest, context: Context) -> Account:
    try:
        return await context.login(body.email, body.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from None


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(context: Context) -> None:
    await context.logout()


@router.get("/session", response_model=SessionResponse)
async def get_session(context: Context) -> SessionResponse:
    """Return the logged-in account, or ``null``."""
    account = context.account
    return SessionResponse(account=AccountResponse.model_validate(account) if account is not None else None)
