import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_api.config import Settings, get_settings
from recipe_api.database.mongo import connect, ensure_indexes
from recipe_api.exceptions import RecipeApiError, ValidationError
from recipe_api.routes import auth_route, recipe_route
from recipe_api.utils.responses import error, success
from recipe_api.utils.validators import violations

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RecipeApiError)
    async def handle_api_error(request: Request, exc: RecipeApiError):
        return error(exc.message, exc.status_code, exc.data)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        # malformed path/query parameters get the same 400 shape as bodies
        invalid = ValidationError(data=violations(exc.errors()))
        return error(invalid.message, invalid.status_code, invalid.data)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error("Endpoint functionality is not available", 404)
        if exc.status_code == 405:
            return error("Method not allowed", 405)
        return error(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error in %s %s", request.method, request.url.path)
        return error("Internal Server Error", 500)


def create_app(settings: Optional[Settings] = None, database=None) -> FastAPI:
    """Build the API. ``database`` lets callers hand in an already open Motor database."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if app.state.db is None:
            client = connect(settings)
            app.state.db = client[settings.mongo_db]
        await ensure_indexes(app.state.db)
        logger.info("recipe api ready (db=%s)", settings.mongo_db)
        yield
        if client is not None:
            client.close()
            app.state.db = None

    app = FastAPI(title="Recipe API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    # Add routers
    app.include_router(recipe_route.router, prefix="/recipes", tags=["Recipes"])
    app.include_router(auth_route.router, prefix="/users", tags=["Users"])

    @app.get("/")
    async def root():
        return success("Welcome to Recipe API")

    register_exception_handlers(app)

    # Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()
