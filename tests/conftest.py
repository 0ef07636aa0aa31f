import copy
import json
from typing import Any, Dict, List, Optional

import pytest

from postsync.gateway.base import BaseGateway, GatewayError
from postsync.models.migration import MigrationConfig

SOURCE = "legacy_instance"
TARGET = "current_instance"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)


class FakeSession:
    """Stands in for requests.Session: records calls and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


class InMemoryGateway(BaseGateway):
    """Backend fake: one list of rows per (instance, collection)."""

    def __init__(self, data: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[tuple, List[Dict[str, Any]]] = {}
        for instance, rows in (data or {}).items():
            self.tables[(instance, "posts")] = copy.deepcopy(rows)
        self.reads: List[tuple] = []
        self.creates: List[tuple] = []
        self.fail_read: Optional[str] = None
        self.fail_create_after: Optional[int] = None

    def rows(self, instance: str, collection: str = "posts") -> List[Dict[str, Any]]:
        return self.tables.setdefault((instance, collection), [])

    def read(self, instance, collection, params=None):
        self.reads.append((instance, collection, dict(params or {})))
        if self.fail_read == instance:
            raise GatewayError("HTTP 503: upstream unavailable", 503)
        limit = int((params or {}).get("limit", 0)) or None
        return {"status": "success", "data": copy.deepcopy(self.rows(instance, collection)[:limit])}

    def create(self, instance, collection, record):
        if self.fail_create_after is not None and len(self.creates) >= self.fail_create_after:
            raise GatewayError("Duplicate entry", 200, {"ok": False, "error": "Duplicate entry"})
        self.creates.append((instance, collection, copy.deepcopy(record)))
        rows = self.rows(instance, collection)
        stored = dict(record, id=len(rows) + 1)
        rows.append(stored)
        return {"status": "success", "id": stored["id"]}


@pytest.fixture
def config() -> MigrationConfig:
    return MigrationConfig(
        api_key="test-key",
        target_instance=TARGET,
        base_url="https://ncb.example.test",
        default_source_instance=SOURCE,
    )


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()
