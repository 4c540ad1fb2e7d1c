# =============================================================================
# app/routers/seo.py - Crawler Endpoints
# =============================================================================
# robots.txt and sitemap.xml. Only production is indexable; every other
# environment tells crawlers to stay out.
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from app.config import settings
from core.services.sitemap_service import SitemapService

router = APIRouter()

PUBLIC_CACHE_HEADERS = {"Cache-Control": "public, max-age=3600"}


def resolve_site_url(request: Request) -> str:
    """SITE_URL if configured, else the origin the request came in on."""
    if settings.SITE_URL:
        return settings.SITE_URL.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def generate_robots_txt(is_production: bool, site_url: str) -> str:
    """robots.txt body for the given environment."""
    if not is_production:
        return (
            "# SkillSwap Non-Production Environment\n"
            "# Disallow all search engines from indexing non-production environments\n"
            "User-agent: *\n"
            "Disallow: /\n"
        )

    return (
        "# SkillSwap Production Environment\n"
        "# Allow all search engines to index the site\n"
        "User-agent: *\n"
        "Allow: /\n"
        "\n"
        "# Disallow specific areas\n"
        "Disallow: /api/\n"
        "Disallow: /admin/\n"
        "Disallow: /dashboard/\n"
        "Disallow: /profile/*/edit\n"
        "Disallow: /inbox/\n"
        "Disallow: /settings/\n"
        "\n"
        "# Disallow parameters that may create duplicate content\n"
        "Disallow: /*?source=*\n"
        "Disallow: /*?ref=*\n"
        "Disallow: /*&utm_*=*\n"
        "\n"
        "# Temporary system areas\n"
        "Disallow: /maintenance\n"
        "Disallow: /system/\n"
        "\n"
        "# Sitemap\n"
        f"Sitemap: {site_url}/sitemap.xml\n"
    )


@router.get("/robots", response_class=PlainTextResponse)
async def robots_txt(request: Request):
    """robots.txt for the current environment (cached for an hour)."""
    body = generate_robots_txt(settings.is_production, resolve_site_url(request))
    return PlainTextResponse(body, headers=PUBLIC_CACHE_HEADERS)


@router.get("/sitemap")
async def sitemap_xml(request: Request):
    """sitemap.xml; catalog pages are only listed in production."""
    xml = SitemapService.build_sitemap(
        resolve_site_url(request),
        include_dynamic=settings.is_production,
    )
    return Response(content=xml, media_type="application/xml", headers=PUBLIC_CACHE_HEADERS)
