# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the SkillSwap API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    SkillSwapException,
    skillswap_exception_handler,
    validation_exception_handler,
)
from app.routers import health, users, seo, skills, user_skills, trades, messages, matches
from app.auth import routes as auth_routes
from app.websocket import routes as websocket_routes
from lib.monitoring import init_sentry, report_exception

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Paths that keep answering while in maintenance mode
MAINTENANCE_EXEMPT_PREFIXES = ("/api/health",)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: initialize error reporting, log configuration
    - Shutdown: log
    """
    logger.info(f"Starting SkillSwap API {settings.APP_VERSION} in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    init_sentry()
    if settings.MAINTENANCE_MODE:
        logger.warning("Maintenance mode is ON - only health checks will be served")

    yield

    logger.info("Shutting down SkillSwap API")


# Create FastAPI application
app = FastAPI(
    title="SkillSwap API",
    description="""
## Skill-Trading Marketplace API

SkillSwap lets people trade what they know for what they want to learn.

### How It Works

1. **List Skills** - Add catalog skills to your profile as offered or wanted
2. **Find People** - Search users or get matches whose skills complement yours
3. **Propose a Trade** - Offer one of your skills for one of theirs
4. **Talk It Through** - Message inside the trade; updates arrive over WebSocket

Persistence, auth and file storage are provided by Supabase.
""",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Sign-up, login and token checks"},
        {"name": "Users", "description": "User search and profiles"},
        {"name": "Skills", "description": "Skills catalog"},
        {"name": "User Skills", "description": "Your offered and wanted skills"},
        {"name": "Matches", "description": "Users whose skills complement yours"},
        {"name": "Trades", "description": "Trade proposals and their conversations"},
        {"name": "Messages", "description": "Per-message actions"},
        {"name": "SEO", "description": "robots.txt and sitemap.xml"},
        {"name": "WebSocket", "description": "Real-time trade messages"},
        {"name": "Health", "description": "API health and liveness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def maintenance_mode(request: Request, call_next):
    """Answer 503 to everything but health checks while MAINTENANCE_MODE is on."""
    if settings.MAINTENANCE_MODE and not request.url.path.startswith(MAINTENANCE_EXEMPT_PREFIXES):
        return JSONResponse(
            status_code=503,
            content={
                "detail": "SkillSwap is down for maintenance. Please try again shortly.",
                "code": "MAINTENANCE",
            },
            headers={"Retry-After": "300"},
        )
    return await call_next(request)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SkillSwapException)
async def handle_skillswap_exception(request: Request, exc: SkillSwapException):
    """Handle custom SkillSwap exceptions."""
    return await skillswap_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed query parameters and bodies."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    report_exception(exc, path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# User search and profiles
app.include_router(
    users.router,
    prefix="/api/users",
    tags=["Users"]
)

# Skills catalog
app.include_router(
    skills.router,
    prefix="/api/skills",
    tags=["Skills"]
)

# Offered and wanted skills
app.include_router(
    user_skills.router,
    prefix="/api/user-skills",
    tags=["User Skills"]
)

# Matching
app.include_router(
    matches.router,
    prefix="/api/matches",
    tags=["Matches"]
)

# Trades and their messages
app.include_router(
    trades.router,
    prefix="/api/trades",
    tags=["Trades"]
)

# Per-message actions
app.include_router(
    messages.router,
    prefix="/api/messages",
    tags=["Messages"]
)

# robots.txt and sitemap.xml
app.include_router(
    seo.router,
    prefix="/api",
    tags=["SEO"]
)

# WebSocket endpoints (Real-time updates)
app.include_router(
    websocket_routes.router,
    tags=["WebSocket"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "SkillSwap API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/api/health",
    }
