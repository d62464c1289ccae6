"""HTTP surface of the relay."""
from __future__ import annotations

import contextlib
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ghost_bunny_purge.auth import TRIGGER_TOKEN_HEADER
from ghost_bunny_purge.cleanup import cleanup_perma_cache
from ghost_bunny_purge.errors import AuthenticationError, ConfigurationError
from ghost_bunny_purge.models.purge import PurgeRequest
from ghost_bunny_purge.models.settings import EnvSettings, load_settings
from ghost_bunny_purge.purge import CleanupFunc, handle_purge_request
from ghost_bunny_purge.utils.signing import SIGNATURE_HEADER

log = logging.getLogger(__name__)

PURGE_PATH = "/purge-full-cache"
DEFAULT_HTTP_TIMEOUT = 30.0


def create_app(
    settings: EnvSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    cleanup: CleanupFunc = cleanup_perma_cache,
) -> FastAPI:
    """
    Build the relay application.

    Without explicit settings, they are loaded from the environment. A missing
    variable does not stop the app from starting; every purge request then
    answers 500 before any remote call is made.
    """
    config_error: str | None = None
    if settings is None:
        try:
            settings = load_settings()
        except ConfigurationError as e:
            log.error("%s", e)
            config_error = str(e)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        timeout = settings.purge_relay_http_timeout if settings else DEFAULT_HTTP_TIMEOUT
        async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
            app.state.client = client
            yield

    app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

    @app.exception_handler(StarletteHTTPException)
    async def plain_http_error(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.post(PURGE_PATH, response_class=PlainTextResponse)
    async def purge_full_cache(request: Request):
        # The body is read here, once, and only the captured bytes travel further.
        body = await request.body()
        purge_request = PurgeRequest(
            body=body,
            signature_header=request.headers.get(SIGNATURE_HEADER),
            trigger_token=request.headers.get(TRIGGER_TOKEN_HEADER),
        )

        try:
            if config_error is not None:
                raise ConfigurationError(config_error)
            tally = await handle_purge_request(
                purge_request, settings, request.app.state.client, cleanup=cleanup
            )
        except AuthenticationError as e:
            return PlainTextResponse(str(e), status_code=403)
        except Exception as e:
            log.exception("Error in handle_purge_request")
            return PlainTextResponse(f"An error occurred: {e}", status_code=500)

        return PlainTextResponse(
            f"Full cache purge initiated successfully. Cleanup result: {tally}"
        )

    return app
