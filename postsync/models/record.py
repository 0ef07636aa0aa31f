"""Record models for migration data."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

# Loosely-shaped row as returned by the backend's read endpoint.
SourceRecord = Dict[str, Any]

# Canonical payload sent to the backend's create endpoint.
NormalizedRecord = Dict[str, Any]


@dataclass
class RecordError:
    """A per-record failure that does not abort the run."""
    error: str
    payload: NormalizedRecord = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "error": self.error,
            "payload": self.payload,
        }


@dataclass
class MigrationResult:
    """Aggregate outcome of one migration run."""
    source_instance: str
    target_instance: str
    dry_run: bool = True
    ok: bool = True
    source_count: int = 0
    created: int = 0
    would_create: int = 0
    skipped: int = 0
    errors: List[RecordError] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        """Created count as reported to callers (would-create on dry runs)."""
        return self.would_create if self.dry_run else self.created

    def add_error(self, error: str, payload: NormalizedRecord) -> None:
        """Record a per-record error."""
        self.errors.append(RecordError(error=error, payload=payload))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON envelope returned by the HTTP surface."""
        return {
            "ok": self.ok,
            "dryRun": self.dry_run,
            "sourceInstance": self.source_instance,
            "targetInstance": self.target_instance,
            "sourceCount": self.source_count,
            "created": self.created_count,
            "skipped": self.skipped,
            "errors": [e.to_dict() for e in self.errors],
        }
