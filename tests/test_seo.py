# =============================================================================
# tests/test_seo.py - robots.txt & sitemap.xml Tests
# =============================================================================
# Only production is indexable. Everything else disallows all crawlers
# and lists static pages only.
# =============================================================================

import xml.etree.ElementTree as ET

import pytest

from app.config import settings
from core.services.sitemap_service import STATIC_PAGES, SitemapEntry, format_sitemap_xml

SITEMAP_NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    monkeypatch.setattr(settings, "SITE_URL", "https://skillswap.example/")


def locs(xml_text: str) -> list[str]:
    root = ET.fromstring(xml_text)
    return [el.text for el in root.findall("sm:url/sm:loc", SITEMAP_NS)]


class TestRobots:
    """GET /api/robots"""

    def test_non_production_disallows_everything(self, client):
        response = client.get("/api/robots")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "User-agent: *\nDisallow: /\n" in response.text
        assert "Sitemap:" not in response.text

    def test_production_allows_with_exclusions(self, client, production):
        text = client.get("/api/robots").text

        assert text.startswith("# SkillSwap Production Environment\n")
        assert "Allow: /\n" in text
        assert "Disallow: /api/\n" in text
        assert "Disallow: /profile/*/edit\n" in text
        assert "Disallow: /*&utm_*=*\n" in text
        assert text.endswith("Sitemap: https://skillswap.example/sitemap.xml\n")

    def test_falls_back_to_request_origin(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(settings, "SITE_URL", None)

        text = client.get("/api/robots").text

        assert "Sitemap: http://testserver/sitemap.xml" in text

    def test_cached_for_an_hour(self, client):
        assert client.get("/api/robots").headers["cache-control"] == "public, max-age=3600"


class TestSitemap:
    """GET /api/sitemap"""

    @pytest.fixture
    def catalog(self, seeded_db):
        seeded_db.insert("skill_categories", [
            {"slug": "music", "is_active": True, "updated_at": "2024-03-01T00:00:00+00:00"},
            {"slug": "retired", "is_active": False},
        ])
        seeded_db.insert("skills", [
            {"id": "s-1", "is_active": True, "updated_at": "2024-03-02T00:00:00+00:00"},
            {"id": "s-2", "is_active": False},
        ])
        seeded_db.tables["users"][0].update(is_verified=True, account_status="active")
        return seeded_db

    def test_non_production_lists_static_pages_only(self, client, catalog):
        response = client.get("/api/sitemap")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert len(locs(response.text)) == len(STATIC_PAGES)

    def test_production_adds_catalog(self, client, catalog, production):
        urls = locs(client.get("/api/sitemap").text)

        assert urls[0] == "https://skillswap.example/"
        assert "https://skillswap.example/skills/category/music" in urls
        assert "https://skillswap.example/skills/s-1" in urls
        assert f"https://skillswap.example/profile/{catalog.tables['users'][0]['id']}" in urls
        assert not any("retired" in u or "s-2" in u for u in urls)
        assert len(urls) == len(STATIC_PAGES) + 3

    def test_catalog_failure_keeps_static_pages(self, client, catalog, production):
        catalog.fail("skill_categories", "select")

        response = client.get("/api/sitemap")

        assert response.status_code == 200
        assert len(locs(response.text)) == len(STATIC_PAGES)


class TestSitemapFormat:
    """XML rendering."""

    def test_escapes_loc(self):
        xml = format_sitemap_xml([SitemapEntry(loc="https://x.example/?a=1&b='2'")])

        assert "<loc>https://x.example/?a=1&amp;b=&apos;2&apos;</loc>" in xml
        assert locs(xml) == ["https://x.example/?a=1&b='2'"]

    def test_priority_one_decimal(self):
        xml = SitemapEntry(loc="https://x.example/", priority=1, changefreq="daily").to_xml()

        assert "<priority>1.0</priority>" in xml
        assert "<changefreq>daily</changefreq>" in xml
