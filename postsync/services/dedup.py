"""Slug-based deduplication index."""

import logging
from typing import Any, Dict, Iterable, Optional, Set

logger = logging.getLogger(__name__)


def slug_key(slug: Any) -> str:
    """Case-insensitive lookup key for a slug."""
    if slug is None:
        return ""
    return str(slug).lower()


class DedupIndex:
    """
    Set of lower-cased slugs already present at the destination.

    Built once per run from the destination's records and grown as records
    are created (or would be created, on dry runs). There is no removal; the
    index is discarded when the run ends.
    """

    def __init__(self, slugs: Optional[Iterable[str]] = None):
        self._slugs: Set[str] = set()
        for slug in slugs or ():
            self.add(slug)

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "DedupIndex":
        """Seed from destination rows, ignoring rows without a slug."""
        index = cls(record.get("slug") for record in records if isinstance(record, dict))
        logger.debug(f"Seeded dedup index with {len(index)} slugs")
        return index

    def has(self, slug: Any) -> bool:
        return bool(slug_key(slug)) and slug_key(slug) in self._slugs

    def add(self, slug: Any) -> None:
        key = slug_key(slug)
        if key:
            self._slugs.add(key)

    def __contains__(self, slug: Any) -> bool:
        return self.has(slug)

    def __len__(self) -> int:
        return len(self._slugs)
