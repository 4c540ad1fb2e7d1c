# =============================================================================
# core/services/sitemap_service.py - Sitemap Generation
# =============================================================================
# Builds sitemap.xml for crawlers.
#
# Static marketing pages are always listed. In production the public
# catalog is added too: active skill categories, the 1000 most recently
# updated active skills and up to 1000 verified, active profiles.
# A failure fetching the dynamic part never fails the sitemap.
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from xml.sax.saxutils import escape

from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Rows fetched per dynamic section
MAX_DYNAMIC_ENTRIES = 1000

# path, changefreq, priority
STATIC_PAGES: list[tuple[str, str, float]] = [
    ("/", "daily", 1.0),
    ("/about", "monthly", 0.8),
    ("/skills", "daily", 0.9),
    ("/contact", "monthly", 0.7),
    ("/faq", "monthly", 0.6),
    ("/terms", "yearly", 0.5),
    ("/privacy", "yearly", 0.5),
]

_XML_ENTITIES = {"'": "&apos;", '"': "&quot;"}


@dataclass
class SitemapEntry:
    """One <url> element."""
    loc: str
    lastmod: str | None = None
    changefreq: str | None = None
    priority: float | None = None

    def to_xml(self) -> str:
        lines = ["  <url>", f"    <loc>{escape(self.loc, _XML_ENTITIES)}</loc>"]
        if self.lastmod:
            lines.append(f"    <lastmod>{escape(self.lastmod, _XML_ENTITIES)}</lastmod>")
        if self.changefreq:
            lines.append(f"    <changefreq>{self.changefreq}</changefreq>")
        if self.priority is not None:
            lines.append(f"    <priority>{self.priority:.1f}</priority>")
        lines.append("  </url>")
        return "\n".join(lines)


def format_sitemap_xml(entries: list[SitemapEntry]) -> str:
    """Render entries as a sitemaps.org urlset document."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    parts.extend(entry.to_xml() for entry in entries)
    parts.append("</urlset>")
    return "\n".join(parts)


class SitemapService:
    """Collects sitemap entries for the site."""

    @staticmethod
    def static_entries(site_url: str) -> list[SitemapEntry]:
        now = datetime.now(timezone.utc).isoformat()
        return [
            SitemapEntry(loc=f"{site_url}{path}", lastmod=now, changefreq=freq, priority=priority)
            for path, freq, priority in STATIC_PAGES
        ]

    @staticmethod
    def dynamic_entries(site_url: str) -> list[SitemapEntry]:
        """
        Public catalog pages from the database.

        Returns whatever was collected before a failure; errors are logged.
        """
        client = SupabaseClient.get_anon_client()
        now = datetime.now(timezone.utc).isoformat()
        entries: list[SitemapEntry] = []

        try:
            categories = (
                client.table("skill_categories")
                .select("slug, updated_at")
                .eq("is_active", True)
                .execute()
            )
            for category in categories.data or []:
                entries.append(SitemapEntry(
                    loc=f"{site_url}/skills/category/{category['slug']}",
                    lastmod=category.get("updated_at") or now,
                    changefreq="weekly",
                    priority=0.7,
                ))

            skills = (
                client.table("skills")
                .select("id, updated_at")
                .eq("is_active", True)
                .order("updated_at", desc=True)
                .limit(MAX_DYNAMIC_ENTRIES)
                .execute()
            )
            for skill in skills.data or []:
                entries.append(SitemapEntry(
                    loc=f"{site_url}/skills/{skill['id']}",
                    lastmod=skill.get("updated_at") or now,
                    changefreq="weekly",
                    priority=0.6,
                ))

            profiles = (
                client.table("users")
                .select("id, updated_at")
                .eq("is_verified", True)
                .eq("account_status", "active")
                .limit(MAX_DYNAMIC_ENTRIES)
                .execute()
            )
            for profile in profiles.data or []:
                entries.append(SitemapEntry(
                    loc=f"{site_url}/profile/{profile['id']}",
                    lastmod=profile.get("updated_at") or now,
                    changefreq="weekly",
                    priority=0.5,
                ))

        except Exception as e:
            logger.error(f"Error fetching dynamic content for sitemap: {e}")

        return entries

    @staticmethod
    def build_sitemap(site_url: str, include_dynamic: bool) -> str:
        """Build the full sitemap document."""
        entries = SitemapService.static_entries(site_url)
        if include_dynamic:
            entries.extend(SitemapService.dynamic_entries(site_url))
        return format_sitemap_xml(entries)
