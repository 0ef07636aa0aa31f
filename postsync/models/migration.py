"""Migration configuration models."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

DEFAULT_BASE_URL = "https://api.nocodebackend.com"
DEFAULT_SOURCE_INSTANCE = "54230_bangtan_mom_blog_site"
DEFAULT_COLLECTION = "posts"
DEFAULT_READ_LIMIT = 2000
DEFAULT_TIMEOUT = 30.0

# Environment variable names, in lookup order.
API_KEY_VARS = ("NCB_API_KEY", "VITE_NCB_API_KEY")
TARGET_INSTANCE_VARS = (
    "VITE_NCB_INSTANCE",
    "VITE_NCB_INSTANCE_ID",
    "NCB_INSTANCE",
    "NCB_INSTANCE_ID",
)
BASE_URL_VARS = ("NCB_URL", "NCB_BASE_URL")
SOURCE_INSTANCE_VARS = ("NCB_SOURCE_INSTANCE",)
TIMEOUT_VARS = ("NCB_TIMEOUT",)


def _first_env(environ: Mapping[str, str], names) -> Optional[str]:
    """Return the first non-empty value among the given variable names."""
    for name in names:
        value = environ.get(name)
        if value and value.strip():
            return value.strip()
    return None


@dataclass
class MigrationConfig:
    """Process-level configuration for a migration.

    The destination instance, base URL and API key come from here and never
    from request parameters, so a caller cannot redirect writes to another
    account.
    """
    api_key: Optional[str] = None
    target_instance: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    default_source_instance: str = DEFAULT_SOURCE_INSTANCE
    collection: str = DEFAULT_COLLECTION
    read_limit: int = DEFAULT_READ_LIMIT
    timeout: float = DEFAULT_TIMEOUT

    def missing(self) -> list:
        """Names of required settings that are not set."""
        missing = []
        if not self.api_key:
            missing.append("NCB_API_KEY")
        if not self.target_instance:
            missing.append("NCB_INSTANCE")
        return missing

    def resolve_source_instance(self, requested: Optional[str]) -> str:
        """Trim the requested source instance, falling back to the default."""
        value = (requested or "").strip()
        return value or self.default_source_instance

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (the API key is never included)."""
        return {
            "has_api_key": bool(self.api_key),
            "target_instance": self.target_instance,
            "base_url": self.base_url,
            "default_source_instance": self.default_source_instance,
            "collection": self.collection,
            "read_limit": self.read_limit,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationConfig":
        """Create from dictionary representation."""
        return cls(
            api_key=data.get("api_key"),
            target_instance=data.get("target_instance"),
            base_url=(data.get("base_url") or DEFAULT_BASE_URL).rstrip("/"),
            default_source_instance=data.get("default_source_instance") or DEFAULT_SOURCE_INSTANCE,
            collection=data.get("collection", DEFAULT_COLLECTION),
            read_limit=int(data.get("read_limit", DEFAULT_READ_LIMIT)),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MigrationConfig":
        """Create from process environment variables."""
        env = os.environ if environ is None else environ
        timeout = _first_env(env, TIMEOUT_VARS)
        return cls(
            api_key=_first_env(env, API_KEY_VARS),
            target_instance=_first_env(env, TARGET_INSTANCE_VARS),
            base_url=(_first_env(env, BASE_URL_VARS) or DEFAULT_BASE_URL).rstrip("/"),
            default_source_instance=_first_env(env, SOURCE_INSTANCE_VARS) or DEFAULT_SOURCE_INSTANCE,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        )


@dataclass
class MigrationOptions:
    """Per-invocation options for a migration run."""
    dry_run: bool = True
    source_instance: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "dry_run": self.dry_run,
            "source_instance": self.source_instance,
        }
