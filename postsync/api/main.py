"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .responses import error_response
from .routes import migrate, ncb

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Post Sync API",
    description="Migration and backend proxy endpoints for the blog",
    version=__version__,
)

# Preflight requests carrying an Origin header are answered here
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(migrate.router, prefix="/api/migrate", tags=["migrate"])
app.include_router(ncb.router, prefix="/api/ncb", tags=["ncb"])
app.include_router(ncb.diagnostics_router, prefix="/api", tags=["diagnostics"])


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    """Report unexpected failures with the standard error envelope."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return error_response(str(exc))
