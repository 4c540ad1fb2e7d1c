# =============================================================================
# core/services/auth_service.py - Password Auth Proxy
# =============================================================================
# Thin wrapper over Supabase Auth sign-up and sign-in. The hosted
# service owns credentials; errors it returns are passed through.
# =============================================================================

import logging
from typing import Any

from supabase import AuthApiError

from lib.supabase_client import SupabaseClient
from app.exceptions import AuthenticationFailedError, InvalidRequestError

logger = logging.getLogger(__name__)


def _session_dict(response: Any) -> dict[str, Any]:
    """Flatten a gotrue AuthResponse into the API shape."""
    user = response.user
    session = response.session
    return {
        "user_id": user.id,
        "email": user.email,
        "access_token": session.access_token if session else None,
        "refresh_token": session.refresh_token if session else None,
        "expires_in": session.expires_in if session else None,
        "token_type": "bearer",
    }


class AuthService:
    """Service for password sign-up and sign-in."""

    @staticmethod
    def sign_up(email: str, password: str, full_name: str | None = None) -> dict[str, Any]:
        """
        Register a new account.

        Raises:
            InvalidRequestError: If Supabase Auth rejects the sign-up
        """
        client = SupabaseClient.create_auth_client()
        credentials: dict[str, Any] = {"email": email, "password": password}
        if full_name:
            credentials["options"] = {"data": {"full_name": full_name}}

        try:
            response = client.auth.sign_up(credentials)
        except AuthApiError as e:
            logger.warning(f"Sign-up rejected for {email}: {e.message}")
            raise InvalidRequestError(e.message)

        if response.user is None:
            raise InvalidRequestError("Sign-up failed")

        logger.info(f"Signed up user: {response.user.id}")
        return _session_dict(response)

    @staticmethod
    def sign_in(email: str, password: str) -> dict[str, Any]:
        """
        Exchange email and password for tokens.

        Raises:
            AuthenticationFailedError: If the credentials are rejected
        """
        client = SupabaseClient.create_auth_client()

        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as e:
            logger.warning(f"Sign-in rejected for {email}: {e.message}")
            raise AuthenticationFailedError(e.message)

        if response.user is None or response.session is None:
            raise AuthenticationFailedError()

        logger.info(f"Signed in user: {response.user.id}")
        return _session_dict(response)
