"""Plain-text and date helpers for post content."""

import html
import logging
import re
from typing import Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

MISSING_DATE = "—"

_TAGS = re.compile(r"<[^>]*>?")


def strip_html(value) -> str:
    """Remove HTML tags and decode entities, e.g. for excerpts."""
    if not value:
        return ""
    return html.unescape(_TAGS.sub("", str(value)))


def format_date(value, fmt: Optional[str] = None) -> str:
    """
    Format a date string or datetime for display.

    Without ``fmt`` the result looks like ``"Dec 2, 2025"``, with the day
    unpadded on every platform.
    """
    if not value:
        return MISSING_DATE

    try:
        if hasattr(value, "strftime"):
            dt = value
        else:
            dt = date_parser.parse(str(value))
        if fmt:
            return dt.strftime(fmt)
        return f"{dt:%b} {dt.day}, {dt:%Y}"
    except (ValueError, OverflowError, TypeError) as e:
        logger.warning(f"Date formatting error for {value!r}: {e}")
        return MISSING_DATE
