from datetime import datetime

from postsync.services.text import MISSING_DATE, format_date, strip_html


def test_strip_html_removes_tags_and_decodes_entities():
    assert strip_html("<p>Tom &amp; Jerry <b>forever</b></p>") == "Tom & Jerry forever"


def test_strip_html_empty():
    assert strip_html(None) == ""
    assert strip_html("") == ""


def test_format_date_iso_and_plain_dates():
    assert format_date("2025-12-02") == "Dec 2, 2025"
    assert format_date("2025-12-02T15:30:00Z") == "Dec 2, 2025"


def test_format_date_datetime_and_custom_format():
    assert format_date(datetime(2024, 1, 15), "%Y/%m/%d") == "2024/01/15"


def test_format_date_missing_or_invalid():
    assert format_date(None) == MISSING_DATE
    assert format_date("") == MISSING_DATE
    assert format_date("banana") == MISSING_DATE


class StrictStrftimeDate(datetime):
    """Rejects glibc-only directives the way the Windows C runtime does."""

    def strftime(self, fmt):
        if "%-" in fmt:
            raise ValueError("Invalid format string")
        return super().strftime(fmt)


def test_format_date_default_uses_only_portable_directives():
    assert format_date(StrictStrftimeDate(2025, 1, 5)) == "Jan 5, 2025"
    assert format_date(StrictStrftimeDate(2025, 12, 25, 8, 30)) == "Dec 25, 2025"
