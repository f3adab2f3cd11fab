"""FastAPI application and app configuration for the help-desk backend.

This module creates the FastAPI `app`, configures middleware (CORS, rate limiting),
registers the routers under `helpdesk.routers.*`, translates domain errors into
the standard error envelope and initializes the DB on startup
(calls `helpdesk.database.init_db`).
"""

from __future__ import annotations

import logging
import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from helpdesk.config import settings
from helpdesk.database import init_db
from helpdesk.errors import HelpdeskError, error_payload, make_validation_error_response
from helpdesk.routers import services, system, tickets, users

logger = logging.getLogger(__name__)
logging.basicConfig(level=settings.log_level)

# python-jose still calls datetime.utcnow(); keep the noise out of the logs
warnings.filterwarnings("ignore", message=r"datetime.datetime.utcnow\(\) is deprecated")

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Lifespan startup: initializing database")
    init_db()
    yield
    logger.info("Lifespan shutdown")


app = FastAPI(title="Helpdesk Backend", version="1.0.0", lifespan=lifespan)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content=error_payload("rate_limited", "Rate limit exceeded"))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=make_validation_error_response(exc.errors()))


@app.exception_handler(HelpdeskError)
async def helpdesk_error_handler(request: Request, exc: HelpdeskError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # api_error() details already carry the envelope; plain ones get wrapped
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = error_payload("http_error", str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


for module in (system, users, services, tickets):
    app.include_router(module.router)
    logger.debug("Included router: %s", module.__name__)


__all__ = ["app", "limiter"]


if __name__ == "__main__":  # pragma: no cover - manual entry point
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3333)
