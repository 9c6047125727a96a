import logging

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import models  # noqa: F401  registers the tables on Base.metadata
from app.api.v1.main import api_router, demo_router
from app.core.auth import select_auth_provider
from app.core.config import Settings, settings
from app.core.database import Base, engine
from app.core.exceptions import ServiceError
from app.core.logging_config import configure_logging
from app.core.middleware import RequestLoggingMiddleware
from app.initial_data import create_initial_data
from app.services.agent_backend import select_agent_backend

logger = logging.getLogger(__name__)

DEMO_UNAVAILABLE = "Not implemented in demo mode"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as ``{"message": ...}``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build an app bound to ``app_settings``.

    Auth tokens, the ElevenLabs client, the removal policy, CORS and demo mode
    follow ``app_settings``. The database engine is shared by the process and
    always uses the global ``DATABASE_URL``.
    """
    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        openapi_url=f"{app_settings.API_PREFIX}/openapi.json",
    )

    # Strategies are fixed for the lifetime of the app
    app.state.settings = app_settings
    app.state.auth_provider = select_auth_provider(app_settings)
    app.state.agent_backend_cls = select_agent_backend(app_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware, path_prefix=app_settings.API_PREFIX)
    register_exception_handlers(app)

    if app_settings.DEMO_MODE:
        app.include_router(demo_router, prefix=app_settings.API_PREFIX)

        @app.api_route(
            f"{app_settings.API_PREFIX}/{{path:path}}",
            methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
            include_in_schema=False,
        )
        async def not_available_in_demo(path: str):
            raise HTTPException(status_code=501, detail=DEMO_UNAVAILABLE)
    else:
        app.include_router(api_router, prefix=app_settings.API_PREFIX)

    @app.get("/")
    async def read_root():
        return {"message": f"{app_settings.PROJECT_NAME} backend is running"}

    @app.on_event("startup")
    def on_startup():
        Base.metadata.create_all(bind=engine)
        create_initial_data(app_settings)
        logger.info(f"[Startup] {app_settings.PROJECT_NAME} ready (demo mode: {app_settings.DEMO_MODE})")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
