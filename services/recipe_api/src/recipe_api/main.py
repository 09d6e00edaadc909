"""Recipe API entrypoint."""
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from shared.logging import configure_logging
from shared.middleware import RequestIdMiddleware
from shared.schemas import HealthResponse

from recipe_api.api.routes import router
from recipe_api.clients import GeminiClient
from recipe_api.config import MissingApiKeyError, RecipeApiSettings
from recipe_api.errors import BadRequest, RecipeServiceError, UpstreamFailure
from recipe_api.service import RecipeService

log = structlog.get_logger("recipe_api")

_settings: RecipeApiSettings | None = None


def get_settings() -> RecipeApiSettings:
    global _settings
    if _settings is None:
        _settings = RecipeApiSettings()
    return _settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: RecipeApiSettings = app.state.settings
    try:
        api_key = settings.require_api_key()
    except MissingApiKeyError:
        log.error("gemini_api_key_missing", hint="set GEMINI_API_KEY in the environment or .env")
        raise
    llm_client = GeminiClient(
        api_key=api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.upstream_timeout_seconds,
        transport=app.state.upstream_transport,
    )
    app.state.recipe_service = RecipeService(
        llm_client,
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
    )
    log.info("recipe_api_started", port=settings.port, model=settings.gemini_model)
    yield


def create_app(
    settings: RecipeApiSettings | None = None,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(json_logs=settings.log_json, level=settings.log_level)
    app = FastAPI(title="Recipe API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.upstream_transport = upstream_transport
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RecipeServiceError)
    async def _recipe_error(request: Request, exc: RecipeServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        err = BadRequest()
        return JSONResponse(status_code=err.status_code, content=err.to_body())

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        log.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
        err = UpstreamFailure(str(exc) or None)
        return JSONResponse(status_code=err.status_code, content=err.to_body())

    app.include_router(router)

    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(status="ok", service="recipe_api")

    @app.get("/readyz", response_model=HealthResponse)
    async def readyz(request: Request) -> HealthResponse:
        if getattr(request.app.state, "recipe_service", None) is None:
            return HealthResponse(status="unhealthy", service="recipe_api", detail="not started")
        return HealthResponse(status="ok", service="recipe_api")

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    try:
        settings.require_api_key()
    except MissingApiKeyError:
        log.error("gemini_api_key_missing", hint="set GEMINI_API_KEY in the environment or .env")
        raise SystemExit(1)
    uvicorn.run(
        "recipe_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
