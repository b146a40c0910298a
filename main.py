import time
from pathlib import Path
from typing import List, Optional
from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
import uvicorn
from config import Settings
from logger_config import get_logger, setup_logger
from app.error_mapper import register_error_handlers
from app.routes.artifact_routes import router
from app.services.auth_gate import AuthGate, authenticate_requests
from app.services.storage_manager import StorageManager

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create the repository root before serving
    await app.state.storage_manager.initialize()
    yield


async def log_requests(request: Request, call_next):
    """Write one access log line per request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
    return response


def create_app(settings: Settings) -> FastAPI:
    """Build the repository app around an immutable startup configuration."""
    app = FastAPI(
        title="mvnr",
        lifespan=lifespan,
        # Every path is an artifact path, so no docs routes
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )
    app.state.settings = settings
    app.state.auth_gate = AuthGate(settings.password)
    app.state.storage_manager = StorageManager(Path(settings.repo_dir))

    register_error_handlers(app)
    # Added last runs first: the access log wraps the auth gate
    app.middleware("http")(authenticate_requests)
    app.middleware("http")(log_requests)
    app.include_router(router)
    return app


def run(argv: Optional[List[str]] = None):
    settings = Settings.from_args(argv)
    setup_logger(settings.log_level, settings.log_file)
    app = create_app(settings)

    logger.info("Starting artifact repository server...")
    logger.info(f"Listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False
    )


if __name__ == "__main__":
    run()
