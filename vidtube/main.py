# ============================================================================
# FILE: vidtube/main.py
# ============================================================================
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from vidtube.api.v1.router import api_router
from vidtube.config import Settings
from vidtube.core.asset_store import AssetStore, CloudinaryAssetStore
from vidtube.core.cache import RedisCache
from vidtube.core.exceptions import ApiError
from vidtube.core.logging import setup_logging
from vidtube.db.session import create_db_engine, create_session_factory, init_db
from vidtube.services.container import build_services
import logging

logger = logging.getLogger(__name__)

def _error_body(status_code: int, message: str, errors: Optional[List[Any]] = None) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "data": None,
        "message": message,
        "success": False,
        "errors": errors or [],
    }

def _validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # ctx may hold exception objects; input may echo passwords
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in errors
    ]

def _validation_message(errors: List[Dict[str, Any]]) -> str:
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = first.get("msg", "Invalid request").replace("Value error, ", "")
    field = next((str(part) for part in reversed(first.get("loc", ())) if isinstance(part, str)), None)
    if field and first.get("type") != "value_error":
        return f"{field}: {message}"
    return message

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, str(exc.detail)))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        return JSONResponse(status_code=400, content=_error_body(400, _validation_message(errors), _validation_errors(errors)))

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        # Form fields are validated inside the endpoint
        errors = exc.errors()
        return JSONResponse(status_code=400, content=_error_body(400, _validation_message(errors), _validation_errors(errors)))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=_error_body(500, "Something went wrong"))

def create_app(
    settings: Optional[Settings] = None,
    asset_store: Optional[AssetStore] = None,
    cache: Optional[RedisCache] = None,
) -> FastAPI:
    """Build the application and wire every collaborator onto app.state"""
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    init_db(engine)
    cache = cache or RedisCache(settings.REDIS_URL, settings.CACHE_EXPIRE_SECONDS)
    asset_store = asset_store or CloudinaryAssetStore(settings)

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Video sharing backend: accounts, videos, tweets, comments, likes, subscriptions and playlists",
        version="1.0.0",
        debug=settings.DEBUG,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.cache = cache
    app.state.asset_store = asset_store
    app.state.services = build_services(settings, asset_store, cache)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API v1 router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting {settings.APP_NAME} API")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown"""
        logger.info(f"Shutting down {settings.APP_NAME} API")
        engine.dispose()

    return app
