# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import AuthService
from .user_service import UserService
from .skill_service import SkillService
from .user_skill_service import UserSkillService
from .trade_service import TradeService
from .message_service import MessageService
from .match_service import MatchService
from .sitemap_service import SitemapService
from .storage_service import StorageService

__all__ = [
    "AuthService",
    "UserService",
    "SkillService",
    "UserSkillService",
    "TradeService",
    "MessageService",
    "MatchService",
    "SitemapService",
    "StorageService",
]
