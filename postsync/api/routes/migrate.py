"""Post migration endpoint."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..dependencies import get_config, get_gateway
from ..models import ErrorResponse, MigrateRequest, MigrateResponse
from ..responses import PREFLIGHT_HEADERS, error_response, json_response
from ...gateway.base import BaseGateway, GatewayError
from ...models.migration import MigrationConfig, MigrationOptions
from ...orchestrator import MigrationError, MigrationOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_body(request: Request) -> dict:
    """Decode the JSON body; anything unreadable counts as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@router.options("/posts", include_in_schema=False)
async def migrate_posts_preflight():
    """Answer CORS preflight for clients that omit the Origin header."""
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)


@router.post(
    "/posts",
    response_model=MigrateResponse,
    responses={500: {"model": ErrorResponse}},
)
async def migrate_posts(
    request: Request,
    config: MigrationConfig = Depends(get_config),
    gateway: BaseGateway = Depends(get_gateway),
):
    """
    Copy posts from a source instance into the configured target instance.

    Runs as a dry run unless the body sets ``dryRun`` to ``false``. The
    target instance always comes from configuration.
    """
    try:
        body = MigrateRequest.model_validate(await _read_body(request))
    except ValidationError as e:
        return error_response(f"Invalid request body: {e.errors()[0]['msg']}", status_code=400)

    options = MigrationOptions(
        dry_run=body.is_dry_run,
        source_instance=body.source_instance,
    )

    try:
        orchestrator = MigrationOrchestrator(config, gateway)
        result = await run_in_threadpool(orchestrator.run, options)
    except (MigrationError, GatewayError) as e:
        logger.error(f"Migration failed: {e}")
        return error_response(str(e))

    return json_response(result.to_dict())


@router.api_route(
    "/posts",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def migrate_posts_method_not_allowed():
    return error_response("Method not allowed", status_code=405)
