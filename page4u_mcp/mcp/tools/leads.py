from typing import Optional

from page4u_mcp.mcp.formatting import count_header, format_lead_line
from page4u_mcp.mcp.schemas import LeadLimit, Slug
from page4u_mcp.mcp.server import register_tool
from page4u_mcp.services.envelope import as_records
from page4u_mcp.services.page4u import get_page4u_client, page_path


@register_tool
def get_leads(slug: Slug, status: Optional[str] = None, limit: Optional[LeadLimit] = None) -> str:
    """Get leads (contact form submissions) for a page. Returns name, phone, email, message, and submission date.

    Args:
        slug: The page slug
        status: Filter by lead status
        limit: Max results (default: 50)
    """
    params = {}
    if status:
        params["status"] = status
    if limit is not None:
        params["limit"] = limit

    result = get_page4u_client().send("GET", page_path(slug, "/leads"), params=params or None)
    leads = as_records(result.data, "leads")

    if not leads:
        return f'No leads found for "{slug}".'

    lines = [format_lead_line(lead) for lead in leads]
    return f'{count_header(result.total, len(leads), "lead")} for "{slug}":\n\n' + "\n".join(lines)
