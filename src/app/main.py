# src/app/main.py
from __future__ import annotations
import logging
import sys
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.config import settings
from src.app.domain.errors import (
    ExternalErrorKind,
    ExternalServiceError,
    PersistenceError,
    RecipeDomainError,
)
from src.app.routers.preferences import router as preferences_router
from src.app.routers.recipes import router as recipes_router

# Plain stdout logging (works for dev and containers)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

_EXTERNAL_ERROR_DETAILS = {
    ExternalErrorKind.AUTHENTICATION: "AI service authentication failed",
    ExternalErrorKind.RATE_LIMIT: "AI service rate limit exceeded. Please try again later.",
}

app = FastAPI(title="HealthyMeal Recipes API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router)
app.include_router(preferences_router)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RecipeDomainError)
async def handle_domain_error(request: Request, exc: RecipeDomainError) -> JSONResponse:
    if isinstance(exc, ExternalServiceError):
        logger.error("%s %s failed: kind=%s, error=%s", request.method, request.url.path, exc.kind.value, exc)
        detail = _EXTERNAL_ERROR_DETAILS.get(exc.kind, "Failed to modify recipe. Please try again later.")
        return JSONResponse(status_code=exc.status_code, content={"error": detail})

    if isinstance(exc, PersistenceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})

    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.get("/health")
def health():
    return {"ok": True}
