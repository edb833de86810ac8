from datetime import date
from typing import Annotated, Optional

from pydantic import Field

from page4u_mcp.errors import ValidationError
from page4u_mcp.mcp.formatting import format_count, format_period
from page4u_mcp.mcp.schemas import Slug
from page4u_mcp.mcp.server import register_tool
from page4u_mcp.services.envelope import as_record
from page4u_mcp.services.page4u import get_page4u_client, page_path

# (label, field in the analytics payload)
COUNTERS = (
    ("Total Events:", "totalEvents"),
    ("Page Views:", "page_view"),
    ("Button Clicks:", "button_click"),
    ("WhatsApp Clicks:", "whatsapp_click"),
    ("Phone Clicks:", "phone_click"),
    ("Email Clicks:", "email_click"),
    ("Form Submits:", "form_submit"),
)


@register_tool
def get_analytics(
    slug: Slug,
    from_: Annotated[Optional[date], Field(alias="from")] = None,
    to: Optional[date] = None,
) -> str:
    """Get analytics for a page: page views, button clicks, WhatsApp clicks, phone clicks, email clicks, and form submissions.

    Args:
        slug: The page slug
        from_: Start date (YYYY-MM-DD). Omit for all-time.
        to: End date (YYYY-MM-DD). Omit for all-time.
    """
    if from_ and to and to < from_:
        raise ValidationError("to", f"end date {to} is before start date {from_}")

    params = {}
    if from_:
        params["from"] = from_.isoformat()
    if to:
        params["to"] = to.isoformat()

    result = get_page4u_client().send("GET", page_path(slug, "/analytics"), params=params or None)
    data = as_record(result.data, "analytics")

    lines = [f'Analytics for "{slug}" ({format_period(data.get("period"))}):', ""]
    lines += [f"{label:<18}{format_count(data.get(key))}" for label, key in COUNTERS]
    return "\n".join(lines)
