"""Pydantic models for API requests and responses."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MigrateRequest(BaseModel):
    """Body of ``POST /api/migrate/posts``.

    Only a literal ``false`` turns off dry-run mode.
    """
    model_config = ConfigDict(populate_by_name=True)

    dry_run: Optional[Any] = Field(default=None, alias="dryRun")
    source_instance: Optional[str] = Field(default=None, alias="sourceInstance")

    @property
    def is_dry_run(self) -> bool:
        return self.dry_run is not False


class RecordErrorResponse(BaseModel):
    error: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class MigrateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    dry_run: bool = Field(alias="dryRun")
    source_instance: str = Field(alias="sourceInstance")
    target_instance: str = Field(alias="targetInstance")
    source_count: int = Field(alias="sourceCount")
    created: int
    skipped: int
    errors: List[RecordErrorResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str


class HealthConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_instance: bool = Field(alias="hasInstance")
    has_key: bool = Field(alias="hasKey")
    instance_id: Optional[str] = Field(default=None, alias="instanceId")


class HealthResponse(BaseModel):
    ok: bool = True
    route: str = "/api/ncb/health"
    config: HealthConfig
