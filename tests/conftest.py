# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the Supabase clients for an in-memory fake
# - Provides a TestClient with authentication overridden
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.pop("SENTRY_DSN", None)

from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from tests.fakes import ALICE_ID, FakeSupabase, seed_users


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase(monkeypatch):
    """In-memory database behind the service, anon and per-call auth clients."""
    from lib.supabase_client import SupabaseClient

    db = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", db)
    monkeypatch.setattr(SupabaseClient, "_anon_instance", db)
    monkeypatch.setattr(SupabaseClient, "create_auth_client", staticmethod(db.new_auth_client))
    return db


@pytest.fixture
def seeded_db(fake_supabase):
    """Fake database with John Doe, Joan Smith and Mary Major."""
    seed_users(fake_supabase)
    return fake_supabase


@pytest.fixture
def auth_state():
    """Who the test client is authenticated as. Replace ["user"] to switch."""
    from app.auth import AuthUser

    return {"user": AuthUser(id=UUID(ALICE_ID), email="john@example.com")}


@pytest.fixture
def act_as(auth_state):
    """Switch the authenticated user: act_as(BOB_ID)."""
    from app.auth import AuthUser

    def switch(user_id: str, email: str | None = None) -> None:
        auth_state["user"] = AuthUser(id=UUID(user_id), email=email)

    return switch


@pytest.fixture
def client(fake_supabase, auth_state):
    """TestClient with get_current_user overridden."""
    from app.auth import get_current_user
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: auth_state["user"]
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_supabase):
    """TestClient without any auth override."""
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client
