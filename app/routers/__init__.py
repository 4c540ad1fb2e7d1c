# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - users.py: User search and profiles
# - seo.py: robots.txt and sitemap.xml
# - skills.py: Skills catalog
# - user_skills.py: A user's offered and wanted skills
# - trades.py: Trade proposals and their conversations
# - messages.py: Per-message actions
# - matches.py: Skill-complement matching
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import users
from . import seo
from . import skills
from . import user_skills
from . import trades
from . import messages
from . import matches

__all__ = [
    "health",
    "users",
    "seo",
    "skills",
    "user_skills",
    "trades",
    "messages",
    "matches",
]
