"""Data models for the migration application."""

from .migration import (
    MigrationConfig,
    MigrationOptions,
)
from .record import (
    RecordError,
    MigrationResult,
)

__all__ = [
    "MigrationConfig",
    "MigrationOptions",
    "RecordError",
    "MigrationResult",
]
