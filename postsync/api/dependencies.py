"""FastAPI dependencies: configuration and backend gateway."""

from typing import Iterator

from fastapi import Depends

from ..gateway.base import BaseGateway
from ..gateway.ncb import NCBGateway
from ..models.migration import MigrationConfig


def get_config() -> MigrationConfig:
    """Configuration from the process environment, read per request."""
    return MigrationConfig.from_env()


def get_gateway(config: MigrationConfig = Depends(get_config)) -> Iterator[BaseGateway]:
    """Gateway for the configured backend, closed once the response is sent."""
    gateway = NCBGateway.from_config(config)
    try:
        yield gateway
    finally:
        gateway.close()
