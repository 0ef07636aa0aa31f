"""Gateways to the no-code backend data API."""

from .base import BaseGateway, GatewayError, check_response
from .ncb import NCBGateway

__all__ = [
    "BaseGateway",
    "GatewayError",
    "check_response",
    "NCBGateway",
]
