from contextlib import asynccontextmanager
from typing import Callable, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

import logging

from . import config
from .app_logging import setup_logger
from .db import Database
from .exceptions import FamilyTreeError
from .routes import router

origins = ["http://localhost",
           "http://localhost:3000",
           "http://127.0.0.1:3000",
           ]

_UNSET = object()


def create_app(database_url=_UNSET,
               jwt_secret=_UNSET,
               firebase_project_id=_UNSET,
               cors_origins: Optional[str] = None,
               database: Optional[Database] = None,
               configure_logging: bool = True) -> FastAPI:
    """Build the application.

    Settings default to ``family_tree.config``. The ``Database`` is built here
    once and shared by every request through ``app.extra['database']``.
    """
    if configure_logging:
        setup_logger(config.LOG_LEVEL)
    logger = logging.getLogger(__name__)

    if database_url is _UNSET:
        database_url = config.DATABASE_URL
    if jwt_secret is _UNSET:
        jwt_secret = config.JWT_SECRET
    if firebase_project_id is _UNSET:
        firebase_project_id = config.FIREBASE_PROJECT_ID
    if cors_origins is None:
        cors_origins = config.CORS_ORIGINS

    if database is None:
        database = Database(database_url, echo=config.ECHO_SQL)

    if not jwt_secret:
        logger.error("JWT_SECRET needs to be set, sessions cannot be issued or verified.")
    if not firebase_project_id:
        logger.error("FIREBASE_PROJECT_ID needs to be set, logins cannot be verified.")
    logger.info(f"database configured: {database.is_configured()}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(
        title="Family tree API",
        lifespan=lifespan,
        database=database,
        JWT_SECRET=jwt_secret,
        FIREBASE_PROJECT_ID=firebase_project_id,
    )

    allowed: List[str] = list(origins)
    if cors_origins:
        for cors_origin in cors_origins.split(","):
            if cors_origin.strip():
                allowed.append(cors_origin.strip())
    logger.info(f"cors origins: {','.join(allowed)}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(FamilyTreeError)
    async def family_tree_error(request: Request, exc: FamilyTreeError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = {".".join(str(part) for part in error["loc"]): error["msg"]
                  for error in exc.errors()}
        return JSONResponse(status_code=400,
                            content={"error": "Invalid request",
                                     "message": "Request body or parameters are invalid",
                                     "errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500,
                            content={"error": "Server error",
                                     "message": "An unexpected error occurred"})

    @app.middleware("http")
    async def apply_response_headers(request: Request, call_next: Callable) -> Response:
        """Apply response headers to all responses.
           Prevent UI redress attacks.
        """
        response: Response = await call_next(request)
        response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    @app.get("/")
    async def root():
        return {"message": "Family tree API"}

    return app
