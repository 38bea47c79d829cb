# api/main.py
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.errors import LibraryError
from core.sa.database import Database
from api.routes import books, users, loans, dashboard

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, details=None) -> JSONResponse:
    body = {"error": message}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


async def library_error_handler(request: Request, exc: LibraryError):
    return _error(exc.status_code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "message": error.get("msg", ""),
            "type": error.get("type", "")
        }
        for error in exc.errors()
    ]
    return _error(400, "Invalid data", details)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the API around ``database`` (default: one built from DATABASE_URL)."""
    app = FastAPI(title="Library Desk")
    app.state.database = database or Database()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Initialize database on startup
    @app.on_event("startup")
    async def startup_event():
        app.state.database.init_db()

    @app.get("/")
    async def root():
        return {"message": "Library Desk API"}

    app.include_router(books.router)
    app.include_router(users.router)
    app.include_router(loans.router)
    app.include_router(dashboard.router)

    return app
