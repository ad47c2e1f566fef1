"""Application entry point.

Builds the FastAPI application that serves the storefront shipping API,
configures logging and error responses, and owns the aiohttp session shared
by all upstream calls. Run with ``storefront`` (console script) or
``python -m storefront.main``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .api.messages import INTERNAL_ERROR, NO_SERVICE_AVAILABLE
from .api.routes import router
from .api.utils import create_session
from .config import config
from .core.container import Container
from .errors import NoServiceAvailable, ProviderError

# Logging
logging.basicConfig(
    format="%(asctime)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.server.log_level.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the shared HTTP session on startup and close it on shutdown."""
    if not config.logistics.is_configured:
        logger.warning("GHN_TOKEN or GHN_SHOP_ID not set; logistics calls will be rejected")

    app.state.http_session = create_session()
    logger.info("HTTP session opened")
    try:
        yield
    finally:
        await app.state.http_session.close()
        logger.info("HTTP session closed")


async def _no_service(_req: Request, exc: NoServiceAvailable) -> JSONResponse:
    logger.info(f"Quote rejected: {exc}")
    return JSONResponse(status_code=400, content={"error": NO_SERVICE_AVAILABLE})


async def _provider_error(_req: Request, exc: ProviderError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": jsonable_encoder(exc.payload)})


async def _validation_error(_req: Request, exc: RequestValidationError | ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": jsonable_encoder(exc.errors())})


async def _unhandled(_req: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error: {exc}")
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


def create_app(container: Container | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        container: DI container to use, a fresh one when omitted.

    Returns:
        Configured FastAPI instance.
    """
    app = FastAPI(title="Storefront Shipping API", version="1.0.0", lifespan=lifespan)
    app.state.container = container or Container()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NoServiceAvailable, _no_service)
    app.add_exception_handler(ProviderError, _provider_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled)

    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:
    """Run the API server on the configured host and port."""
    logger.info(f"Starting storefront API on {config.server.listen_host}:{config.server.port}")
    uvicorn.run(app, host=config.server.listen_host, port=config.server.port)


if __name__ == "__main__":
    main()
