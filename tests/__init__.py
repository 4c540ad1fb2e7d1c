# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the SkillSwap API:
# - fakes.py / conftest.py: In-memory Supabase and shared fixtures
# - test_models.py: Unit tests for Pydantic model validation
# - test_matching.py: Match scoring
# - test_users.py, test_skills.py, test_trades.py, ...: API endpoints
# - test_swr.py, test_api_client.py: Client-side cache and HTTP client
#
# Run tests with: pytest
# =============================================================================
