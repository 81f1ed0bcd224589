# api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from lending.context import LendingContext
from lending.exceptions import (
    LendingError, NotFoundError, InvalidStateError, ConflictError,
    InvalidInputError, InternalError
)
from lending.utils.log import configure_logging
from api.routes import books

logger = logging.getLogger(__name__)

STATUS_CODES = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: LendingError) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(context: Optional[LendingContext] = None) -> FastAPI:
    """Build the HTTP app around a set of lending services.

    Args:
        context: Services to expose; built from the environment when omitted
    """
    context = context or LendingContext.from_settings()
    configure_logging(context.settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context.database.init_db()
        yield

    app = FastAPI(title="Book Lending", lifespan=lifespan)
    app.state.context = context

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LendingError)
    async def lending_error_handler(request: Request, exc: LendingError):
        code = status_for(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=code, content={"detail": exc.message, "code": exc.code})

    @app.get("/health")
    async def health():
        return {"ok": True}

    app.include_router(books.router)
    return app
