"""Helpers that turn Page4U records into plain text for the assistant"""
from datetime import datetime
from typing import Any, Dict, Optional


def format_date(value: Optional[str]) -> str:
    """Render an ISO timestamp as YYYY-MM-DD; unknown shapes are echoed as-is."""
    if not value:
        return "unknown"
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return str(value)


def format_count(value: Any) -> str:
    if value is None:
        value = 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:,}"
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return str(value)


def format_page_line(page: Dict[str, Any]) -> str:
    return " | ".join([
        f"- {page.get('slug', '?')}",
        page.get("businessName") or "(no name)",
        page.get("status") or "unknown",
        format_date(page.get("createdAt")),
    ])


def format_lead_line(lead: Dict[str, Any]) -> str:
    parts = []
    for key, label in (("name", "Name"), ("phone", "Phone"), ("email", "Email"), ("message", "Message")):
        if lead.get(key):
            parts.append(f"{label}: {lead[key]}")
    parts.append(f"Status: {lead.get('status') or 'unknown'}")
    parts.append(f"Date: {format_date(lead.get('createdAt'))}")
    return " | ".join(parts)


def format_period(period: Any) -> str:
    if isinstance(period, str) and period:
        return period
    if isinstance(period, dict):
        return f"{period.get('from') or '?'} to {period.get('to') or '?'}"
    return "all time"


def count_header(total: Optional[int], shown: int, noun: str) -> str:
    """``"5 lead(s)"`` using the backend total when it sent one."""
    return f"{total if total is not None else shown} {noun}(s)"
