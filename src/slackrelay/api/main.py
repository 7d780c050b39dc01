"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slackrelay import __version__
from slackrelay.api.sse.relay import EventRelay
from slackrelay.core.config import settings
from slackrelay.core.exceptions import SlackRelayError, ValidationError
from slackrelay.core.schemas import ErrorResponse
from slackrelay.slack.client import SlackWebClient
from slackrelay.slack.users import UserDirectory

logger = structlog.get_logger()


def create_app(
    *,
    relay: EventRelay | None = None,
    slack_client: SlackWebClient | None = None,
    user_directory: UserDirectory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The relay, Slack client and user directory live for the lifetime of the
    app and are stored on ``app.state``. Callers may inject their own, which
    is how tests share a relay with the routes.
    """
    relay = relay or EventRelay()
    slack_client = slack_client or SlackWebClient(
        settings.slack_api_base_url,
        client_id=settings.slack_client_id,
        client_secret=settings.slack_client_secret,
        timeout=settings.slack_request_timeout_seconds,
    )
    user_directory = user_directory or UserDirectory(slack_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan: startup and shutdown hooks."""
        logger.info("app_started", app_name=settings.app_name, version=__version__)
        yield
        await slack_client.aclose()
        logger.info("app_stopped", open_streams=relay.subscriber_count())

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.relay = relay
    app.state.slack_client = slack_client
    app.state.user_directory = user_directory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Exception handlers --
    @app.exception_handler(SlackRelayError)
    async def slackrelay_error_handler(_request: Request, exc: SlackRelayError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Unreadable bodies and bad parameters share the 400 envelope.
        errors = [
            {"loc": list(err["loc"]), "type": err["type"], "msg": err["msg"]}
            for err in exc.errors()
        ]
        logger.info("request_validation_failed", errors=errors)
        return _error_response(ValidationError(detail={"errors": errors}))

    # -- Routes --
    from slackrelay.api.routes.events import router as events_router
    from slackrelay.api.routes.health import router as health_router
    from slackrelay.api.routes.oauth import router as oauth_router
    from slackrelay.api.routes.slack import router as slack_router
    from slackrelay.api.routes.sse import router as sse_router

    app.include_router(health_router)
    app.include_router(oauth_router)
    app.include_router(slack_router)
    app.include_router(events_router)
    app.include_router(sse_router)

    return app


def _error_response(exc: SlackRelayError) -> JSONResponse:
    body = ErrorResponse(code=exc.code, message=exc.message, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


app = create_app()
