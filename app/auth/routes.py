# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Sign-up and login are proxied to Supabase Auth; the remaining routes
# read the caller from the Bearer token.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user
from app.auth.models import (
    AuthSessionResponse,
    AuthUser,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from core.services.auth_service import AuthService
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=AuthSessionResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest) -> AuthSessionResponse:
    """
    Create an account with email and password.

    Raises:
        400: If Supabase Auth rejects the sign-up (message passed through)
    """
    return AuthSessionResponse(
        **AuthService.sign_up(request.email, request.password, request.full_name)
    )


@router.post("/login", response_model=AuthSessionResponse)
async def login(request: LoginRequest) -> AuthSessionResponse:
    """
    Sign in with email and password.

    Raises:
        401: If the credentials are rejected
    """
    return AuthSessionResponse(**AuthService.sign_in(request.email, request.password))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    try:
        profile = SupabaseClient.fetch_row("users", user.id)
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch user profile: {e}")
        profile = None

    if profile:
        return UserResponse(**{**profile, "email": profile.get("email") or user.email})

    # User exists in auth but not yet in public.users
    # (might happen if the signup trigger hasn't run yet)
    return UserResponse(id=user.id, email=user.email)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
