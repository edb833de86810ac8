import json
import logging
from typing import Annotated, List, Optional

from pydantic import Field

from page4u_mcp.errors import ProtocolError
from page4u_mcp.mcp.formatting import count_header, format_page_line
from page4u_mcp.mcp.schemas import AssetInput, Locale, PageStatus, Slug
from page4u_mcp.mcp.server import register_tool
from page4u_mcp.services.bundler import build_deploy_file
from page4u_mcp.services.envelope import as_record, as_records
from page4u_mcp.services.page4u import MultipartPayload, get_page4u_client, page_path

logger = logging.getLogger(__name__)

# Python parameter name -> field name in the PUT /pages/{slug} body
UPDATABLE_FIELDS = {
    "business_name": "businessName",
    "headline": "headline",
    "description": "description",
    "phone": "phone",
    "email": "email",
    "whatsapp": "whatsapp",
    "primary_color": "primaryColor",
    "secondary_color": "secondaryColor",
    "google_analytics_id": "googleAnalyticsId",
    "facebook_pixel_id": "facebookPixelId",
}


# =============================================================================
# READ
# =============================================================================

@register_tool
def list_pages(status: Optional[PageStatus] = None) -> str:
    """List all landing pages for the authenticated user. Returns slug, business name, status, and creation date.

    Args:
        status: Filter pages by status
    """
    params = {"status": status} if status else None
    result = get_page4u_client().send("GET", "/pages", params=params)
    pages = as_records(result.data, "pages")

    if not pages:
        return "No pages found."

    lines = [format_page_line(p) for p in pages]
    return f"{count_header(result.total, len(pages), 'page')}:\n\n" + "\n".join(lines)


@register_tool
def get_page(slug: Slug) -> str:
    """Get detailed information about a specific page including business name, contact info, colors, and timestamps.

    Args:
        slug: The page URL slug
    """
    result = get_page4u_client().send("GET", page_path(slug))
    return json.dumps(result.data, indent=2, ensure_ascii=False)


# =============================================================================
# WRITE
# =============================================================================

@register_tool
def deploy_page(
    html: Annotated[str, Field(min_length=1)],
    assets: Optional[List[AssetInput]] = None,
    slug: Optional[str] = None,
    locale: Optional[Locale] = None,
    whatsapp: Optional[str] = None,
) -> str:
    """Deploy a landing page with optional assets (images, CSS, JS). When assets are provided, they are bundled as a ZIP and uploaded together. The HTML can reference assets with relative paths (e.g. <img src="images/logo.png">). Returns the live URL.

    Args:
        html: Complete HTML content for the page
        assets: Additional assets to include (images, CSS, JS, fonts, etc.). Each asset
            has a filename (relative path) and base64-encoded content.
        slug: Custom URL slug (lowercase, hyphens). Auto-generated if omitted.
        locale: Page language, default: he
        whatsapp: WhatsApp number for contact button
    """
    entries = [a.to_entry() for a in assets or []]
    upload = build_deploy_file(html, entries)

    fields = {}
    for name, value in (("slug", slug), ("locale", locale), ("whatsapp", whatsapp)):
        if value:
            fields[name] = value

    logger.info(f"🚀 Deploying {upload.filename} ({len(upload.content)} bytes, {len(entries)} asset(s))")
    result = get_page4u_client().send("POST", "/pages", MultipartPayload(upload, fields))
    data = as_record(result.data, "deploy result")

    missing = [key for key in ("url", "slug") if not data.get(key)]
    if missing:
        raise ProtocolError(f"Deploy result is missing {', '.join(missing)}")

    text = f"Page deployed!\n\nURL: {data['url']}\nSlug: {data['slug']}"
    if data.get("businessName"):
        text += f"\nName: {data['businessName']}"
    if entries:
        text += f"\nAssets: {len(entries)} file(s) included"
    warnings = data.get("warnings") or []
    if warnings:
        text += "\n\nWarnings:\n" + "\n".join(f"- {w}" for w in warnings)
    return text


@register_tool
def update_page(
    slug: Slug,
    business_name: Annotated[Optional[str], Field(alias="businessName")] = None,
    headline: Optional[str] = None,
    description: Optional[str] = None,
    phone: Optional[str] = None,
    email: Optional[str] = None,
    whatsapp: Optional[str] = None,
    primary_color: Annotated[Optional[str], Field(alias="primaryColor")] = None,
    secondary_color: Annotated[Optional[str], Field(alias="secondaryColor")] = None,
    google_analytics_id: Annotated[Optional[str], Field(alias="googleAnalyticsId")] = None,
    facebook_pixel_id: Annotated[Optional[str], Field(alias="facebookPixelId")] = None,
) -> str:
    """Update metadata for an existing page (business name, contact info, colors, tracking IDs).

    Only the fields you pass are changed. An empty string is sent as-is and clears the field.

    Args:
        slug: The page slug to update
        business_name: Business name
        headline: Page headline
        description: Page description
        phone: Phone number
        email: Email address
        whatsapp: WhatsApp number
        primary_color: Primary brand color hex
        secondary_color: Secondary brand color hex
        google_analytics_id: Google Analytics ID
        facebook_pixel_id: Facebook Pixel ID
    """
    provided = {
        "business_name": business_name,
        "headline": headline,
        "description": description,
        "phone": phone,
        "email": email,
        "whatsapp": whatsapp,
        "primary_color": primary_color,
        "secondary_color": secondary_color,
        "google_analytics_id": google_analytics_id,
        "facebook_pixel_id": facebook_pixel_id,
    }
    body = {UPDATABLE_FIELDS[k]: v for k, v in provided.items() if v is not None}

    if not body:
        return "No fields to update."

    result = get_page4u_client().send("PUT", page_path(slug), body)
    data = as_record(result.data, "update result")
    changed = data.get("updated")
    if changed is None:
        changed = list(body)
    return f'Page "{data.get("slug") or slug}" updated. Fields changed: {", ".join(changed) or "(none)"}'


@register_tool
def delete_page(slug: Slug) -> str:
    """Permanently delete a landing page. This cannot be undone.

    Args:
        slug: The page slug to delete
    """
    get_page4u_client().send("DELETE", page_path(slug))
    return f'Page "{slug}" deleted.'
