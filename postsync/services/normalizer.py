"""Normalization of loosely-shaped source rows onto the post schema."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.record import NormalizedRecord, SourceRecord
from .slugs import slugify

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "BangtanMom"
DEFAULT_STATUS = "published"
MISSING_TITLE_OR_SLUG = "Missing title/slug"

# Fields that may be sent empty; every other empty string is dropped.
EMPTY_ALLOWED = frozenset({"excerpt"})

# Never sent to the destination, which assigns its own identity.
IDENTITY_FIELDS = ("id", "ID", "_id")


@dataclass(frozen=True)
class FieldRule:
    """Fallback chain for one target field: the first truthy source wins."""
    target: str
    sources: Tuple[str, ...]
    default: Any = ""
    transform: Optional[Callable[[Any], Any]] = None

    def resolve(self, row: SourceRecord) -> Any:
        value = self.default
        for name in self.sources:
            candidate = row.get(name)
            if candidate:
                value = candidate
                break
        if self.transform is not None:
            value = self.transform(value)
        return value


def _lower_str(value: Any) -> str:
    return str(value).lower()


# Order here is the order of keys in the outgoing payload. ``slug`` falls back
# to the slugified title, handled in ``RecordNormalizer.normalize``.
FIELD_RULES: List[FieldRule] = [
    FieldRule("title", ("title", "post_title", "name")),
    FieldRule("slug", ("slug", "post_slug")),
    FieldRule("excerpt", ("excerpt", "summary")),
    FieldRule("content", ("content", "body", "html")),
    FieldRule("author", ("author",), default=DEFAULT_AUTHOR),
    FieldRule("category", ("category", "category_name")),
    FieldRule("status", ("status",), default=DEFAULT_STATUS, transform=_lower_str),
    FieldRule("date", ("date", "published_date", "published_at")),
    FieldRule("published_date", ("published_date",)),
    FieldRule("published_at", ("published_at",)),
    FieldRule("tags", ("tags",)),
    FieldRule("image", ("image",)),
    FieldRule("image_url", ("image_url",)),
    FieldRule("featured_image_url", ("featured_image_url", "image_url", "image")),
    FieldRule("featured_image_dropbox_url", ("featured_image_dropbox_url",)),
]

ALLOWED_FIELDS = tuple(rule.target for rule in FIELD_RULES)


class RecordNormalizer:
    """
    Maps source rows onto the fixed post schema.

    Each target field is resolved through its ``FieldRule``; the result is
    then filtered so only allowlisted, non-empty values survive (``excerpt``
    may stay empty) and identity fields are always removed.
    """

    def __init__(self, rules: Optional[List[FieldRule]] = None):
        self.rules = list(rules) if rules is not None else list(FIELD_RULES)

    def resolve(self, row: SourceRecord) -> Dict[str, Any]:
        """Apply every fallback chain without filtering."""
        if not isinstance(row, dict):
            row = {}

        mapped = {}
        for rule in self.rules:
            mapped[rule.target] = rule.resolve(row)

        if not mapped.get("slug"):
            mapped["slug"] = slugify(mapped.get("title"))

        return mapped

    def normalize(self, row: SourceRecord) -> NormalizedRecord:
        """Build the outgoing payload for a source row."""
        mapped = self.resolve(row)

        payload: NormalizedRecord = {}
        for key, value in mapped.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip() and key not in EMPTY_ALLOWED:
                continue
            payload[key] = value

        for key in IDENTITY_FIELDS:
            payload.pop(key, None)

        return payload

    @staticmethod
    def validate(payload: NormalizedRecord) -> Optional[str]:
        """Return an error message if the payload cannot be created, else None."""
        if not payload.get("title") or not payload.get("slug"):
            return MISSING_TITLE_OR_SLUG
        return None


_default_normalizer = RecordNormalizer()


def normalize_record(row: SourceRecord) -> NormalizedRecord:
    """Normalize a source row with the default field rules."""
    return _default_normalizer.normalize(row)


def validate_record(payload: NormalizedRecord) -> Optional[str]:
    """Validate a normalized payload, returning an error message or None."""
    return RecordNormalizer.validate(payload)


def rows_from(payload: Any) -> List[SourceRecord]:
    """Extract the row list from a read response body."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    logger.debug("Read response contained no row list")
    return []
