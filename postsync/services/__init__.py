"""Service layer for the migration application."""

from .dedup import DedupIndex
from .normalizer import RecordNormalizer, normalize_record, validate_record, rows_from
from .slugs import slugify, ensure_unique

__all__ = [
    "DedupIndex",
    "RecordNormalizer",
    "normalize_record",
    "validate_record",
    "rows_from",
    "slugify",
    "ensure_unique",
]
