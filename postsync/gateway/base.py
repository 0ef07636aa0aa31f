"""Base gateway interface for the backend data API."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from ..models.record import NormalizedRecord, SourceRecord
from ..services.normalizer import rows_from

logger = logging.getLogger(__name__)


class GatewayError(RuntimeError):
    """A backend call failed at the transport or logical level."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


def decode_body(text: str) -> Any:
    """Decode a JSON body, wrapping undecodable text as ``{"raw": text}``."""
    if not text:
        return {}
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


INSTANCE_PARAM = "Instance"


def without_instance(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Copy query parameters, dropping any spelling of ``Instance``."""
    return {
        key: value for key, value in (params or {}).items()
        if key.lower() != INSTANCE_PARAM.lower()
    }


def check_response(status_code: int, text: str) -> Any:
    """
    Decode a response body and raise ``GatewayError`` on failure.

    Some upstreams answer HTTP 200 with an error body, so ``ok: false`` and
    ``status: "failed"`` are treated as failures as well as non-2xx codes.
    """
    body = decode_body(text)

    if not 200 <= status_code < 300:
        raise GatewayError(f"HTTP {status_code}: {text}", status_code, body)

    if isinstance(body, dict):
        if body.get("ok") is False:
            message = (
                body.get("error") or
                body.get("message") or
                body.get("upstreamPreview") or
                "ok:false"
            )
            raise GatewayError(str(message), status_code, body)

        if str(body.get("status") or "").lower() == "failed":
            message = body.get("error") or body.get("message") or "status:failed"
            raise GatewayError(str(message), status_code, body)

    return body


class BaseGateway(ABC):
    """
    Base class for backend gateways.

    Gateways read and create rows in a collection of a backend instance.
    Failures raise ``GatewayError``; nothing is retried.
    """

    @abstractmethod
    def read(
        self,
        instance: str,
        collection: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Read a collection and return the decoded response body.

        Args:
            instance: Backend instance identifier
            collection: Collection (table) name
            params: Extra query parameters

        Returns:
            Decoded JSON body
        """
        pass

    @abstractmethod
    def create(
        self,
        instance: str,
        collection: str,
        record: NormalizedRecord
    ) -> Dict[str, Any]:
        """
        Create one row and return the backend's receipt.

        Args:
            instance: Backend instance identifier
            collection: Collection (table) name
            record: Payload to create

        Returns:
            Decoded JSON receipt
        """
        pass

    def read_all(
        self,
        instance: str,
        collection: str,
        limit: int
    ) -> List[SourceRecord]:
        """Read up to ``limit`` rows from a collection."""
        body = self.read(instance, collection, {"limit": str(limit)})
        rows = rows_from(body)
        logger.info(f"Read {len(rows)} {collection} rows from {instance}")
        return rows

    def forward(
        self,
        method: str,
        path: str,
        instance: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None
    ) -> Tuple[int, str, str]:
        """
        Pass one request through to the backend unchanged.

        Returns ``(status_code, text, url)`` without inspecting the body.
        Transport failures raise ``GatewayError``.
        """
        raise NotImplementedError(f"{type(self).__name__} does not forward raw requests")

    def close(self):
        """Release any connections held by the gateway."""
