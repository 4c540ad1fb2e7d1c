# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the SkillSwap business logic:
# - models/: Pydantic schemas and matching data classes
# - services/: One service per table, plus matching and sitemap
#
# Code in this package should NOT import from FastAPI.
# Services raise app.exceptions errors; routers turn them into responses.
# =============================================================================
