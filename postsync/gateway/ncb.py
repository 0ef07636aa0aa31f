"""Gateway for the NoCodeBackend REST API."""

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from .base import INSTANCE_PARAM, BaseGateway, GatewayError, check_response, without_instance
from ..models.record import NormalizedRecord

logger = logging.getLogger(__name__)


class NCBGateway(BaseGateway):
    """
    Gateway for a NoCodeBackend data API.

    Reads are ``GET {base}/read/{collection}?Instance=...`` and creates are
    ``POST {base}/create/{collection}?Instance=...``, both authenticated with
    a static bearer token.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: Optional[float] = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the gateway.

        Args:
            base_url: Base URL for the API
            api_key: API key sent as a bearer token
            timeout: Per-request timeout in seconds
            session: Custom requests session
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or self._create_session()

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "NCBGateway":
        """Create a gateway from a ``MigrationConfig``."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key or "",
            timeout=config.timeout,
            session=session,
        )

    def _create_session(self) -> requests.Session:
        """Create a requests session for JSON calls."""
        session = requests.Session()
        session.headers["Content-Type"] = "application/json"
        session.headers["Accept"] = "application/json"
        return session

    def _request(
        self,
        method: str,
        url: str,
        params: Dict[str, Any],
        json_body: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise GatewayError(str(e)) from e

        try:
            return check_response(response.status_code, response.text)
        except GatewayError as e:
            logger.error(f"{method} {url} returned an error: {e}")
            raise

    def read(
        self,
        instance: str,
        collection: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Read a collection and return the decoded response body."""
        query = without_instance(params)
        query[INSTANCE_PARAM] = instance
        logger.debug(f"GET {collection} from {instance} ({query})")
        return self._request("GET", f"{self.base_url}/read/{collection}", query)

    def create(
        self,
        instance: str,
        collection: str,
        record: NormalizedRecord
    ) -> Dict[str, Any]:
        """Create one row and return the backend's receipt."""
        logger.debug(f"POST {collection} to {instance} (slug={record.get('slug')})")
        body = self._request(
            "POST",
            f"{self.base_url}/create/{collection}",
            {INSTANCE_PARAM: instance},
            json_body=record,
        )
        return body if isinstance(body, dict) else {"data": body}

    def forward(
        self,
        method: str,
        path: str,
        instance: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None
    ) -> Tuple[int, str, str]:
        """Pass one request through to ``{base}/{path}`` and return it undecoded."""
        url = f"{self.base_url}/{path.strip('/')}"
        query = without_instance(params)
        query[INSTANCE_PARAM] = instance

        headers = {"Authorization": f"Bearer {self.api_key}"}
        if content_type:
            headers["Content-Type"] = content_type

        logger.debug(f"{method} {url} for {instance}")
        try:
            response = self._session.request(
                method,
                url,
                params=query,
                data=body or None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise GatewayError(str(e)) from e

        return response.status_code, response.text, url

    def close(self):
        """Close the underlying HTTP session."""
        self._session.close()
