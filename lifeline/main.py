from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from lifeline.api.routes import router as api_router
from lifeline.core.config import get_settings
from lifeline.core.errors import LifelineError
from lifeline.core.logging import setup_logging
from lifeline.services.db import init_db

settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title="Lifeline Blood Donation Service", version="0.1.0")

app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(kind: str, message: str) -> dict[str, str]:
    return {"status": "error", "error": kind, "message": message}


@app.exception_handler(LifelineError)
async def handle_lifeline_error(request: Request, exc: LifelineError) -> JSONResponse:
    logger.warning(
        "{method} {path} rejected ({kind}): {message}",
        method=request.method,
        path=request.url.path,
        kind=exc.kind,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.kind, exc.message))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error for {method} {path}", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content=_error_body("internal_error", "Internal server error"))


@app.on_event("startup")
async def on_startup() -> None:
    init_db()
