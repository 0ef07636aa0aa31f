"""Backend proxy and diagnostics endpoints."""

import json
import logging
import os
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from ..dependencies import get_config, get_gateway
from ..models import HealthConfig, HealthResponse
from ..responses import json_response
from ...gateway.base import BaseGateway, GatewayError
from ...models.migration import MigrationConfig

logger = logging.getLogger(__name__)

router = APIRouter()
diagnostics_router = APIRouter()

# Query parameters that are never forwarded upstream, compared lower-cased.
# The instance always comes from configuration.
DROPPED_PARAMS = {"instance", "_t"}

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
PREVIEW_LENGTH = 300
NO_STORE = {"Cache-Control": "no-store"}


def forwarded_params(request: Request) -> Dict[str, str]:
    """Query parameters of ``request`` that may be sent upstream."""
    return {
        key: value for key, value in request.query_params.items()
        if key.lower() not in DROPPED_PARAMS
    }


def decode_text(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return text


@router.get("/health", response_model=HealthResponse)
async def health(config: MigrationConfig = Depends(get_config)):
    """Report which backend settings are present, without revealing them."""
    instance = config.target_instance
    return HealthResponse(
        config=HealthConfig(
            has_instance=bool(instance),
            has_key=bool(config.api_key),
            instance_id=f"{instance[:5]}..." if instance else None,
        )
    ).model_dump(by_alias=True)


@router.get("/read/{table}")
async def read_table(
    table: str,
    request: Request,
    config: MigrationConfig = Depends(get_config),
    gateway: BaseGateway = Depends(get_gateway),
):
    """Proxy a read of ``table`` on the configured instance."""
    if not config.target_instance:
        return json_response(
            {"status": "failed", "reason": "Missing env var", "missing": ["NCB_INSTANCE"]},
            status_code=500,
        )

    params = forwarded_params(request)

    try:
        body = await run_in_threadpool(gateway.read, config.target_instance, table, params)
    except GatewayError as e:
        logger.error(f"Read proxy failed for {table}: {e}")
        return json_response(
            {
                "status": "failed",
                "reason": "Upstream error",
                "upstreamStatus": e.status_code,
                "message": e.message,
            },
            status_code=502,
        )

    return json_response(body)


@router.api_route("/{path:path}", methods=PROXY_METHODS)
async def proxy(
    path: str,
    request: Request,
    config: MigrationConfig = Depends(get_config),
    gateway: BaseGateway = Depends(get_gateway),
):
    """
    Forward ``/{operation}/{table}[/{id}]`` to the configured instance.

    The method, body and content type pass through unchanged. A leading
    segment naming the configured instance is ignored. Upstream failures
    are reported in a 200 ``ok: false`` envelope with a short preview of
    the upstream body; transport failures are a 502.
    """
    segments = [segment for segment in path.split("/") if segment]
    if segments and segments[0] == config.target_instance:
        segments = segments[1:]

    if not segments or segments[0] == "health":
        return await health(config)

    if not config.target_instance or not config.api_key:
        return json_response(
            {
                "ok": False,
                "error": "Missing NCB configuration (Instance or API Key) in environment variables.",
            },
            status_code=500,
            headers=NO_STORE,
        )

    if len(segments) < 2:
        return json_response(
            {"ok": False, "error": "Missing table name in request path."},
            status_code=400,
            headers=NO_STORE,
        )

    body = await request.body()
    try:
        status_code, text, url = await run_in_threadpool(
            gateway.forward,
            request.method,
            "/".join(segments[:3]),
            config.target_instance,
            forwarded_params(request),
            body,
            request.headers.get("content-type"),
        )
    except GatewayError as e:
        logger.error(f"Proxy {request.method} {path} failed: {e}")
        return json_response(
            {"ok": False, "error": "Failed to connect to NCB upstream server.", "details": e.message},
            status_code=502,
            headers=NO_STORE,
        )

    if not 200 <= status_code < 300:
        logger.warning(f"Proxy {request.method} {path} returned HTTP {status_code}")
        return json_response(
            {
                "ok": False,
                "error": "Upstream NCB request failed.",
                "upstreamStatus": status_code,
                "upstreamUrlUsed": url,
                "upstreamPreview": text[:PREVIEW_LENGTH],
            },
            headers=NO_STORE,
        )

    return json_response(
        {"ok": True, "data": decode_text(text), "upstreamStatus": status_code, "upstreamUrlUsed": url},
        headers=NO_STORE,
    )


@diagnostics_router.get("/ping")
async def ping():
    """Liveness check reporting which backend variables are set."""
    return json_response(
        {
            "status": "ok",
            "message": "Functions are working",
            "hasNCB_BASE_URL": bool(os.environ.get("NCB_BASE_URL")),
            "hasNCB_INSTANCE": bool(os.environ.get("NCB_INSTANCE")),
            "hasNCB_API_KEY": bool(os.environ.get("NCB_API_KEY")),
        },
        headers=NO_STORE,
    )
