from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError

from studypack.routes import (
    generate,
    extract,
    chat,
    packs,
    preferences,
    health,
)

from studypack.utils.logger import logger
from studypack.config import CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS
from studypack.utils.cors import empty_preflight
from studypack.utils.error_handler import (
    StudyPackError,
    handle_study_pack_error,
    handle_validation_error,
    log_exceptions,
)


# -------------------------------------------------------------------
# FastAPI application
# -------------------------------------------------------------------
app = FastAPI(
    title="StudyPack Generator API",
    version="0.1.0",
)

# -------------------------------------------------------------------
# Error handling
# -------------------------------------------------------------------
app.add_exception_handler(StudyPackError, handle_study_pack_error)
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.middleware("http")(log_exceptions)

# -------------------------------------------------------------------
# CORS settings
# -------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
)

# OPTIONS gets an empty body instead of Starlette's "OK"
app.middleware("http")(empty_preflight)

logger.info("Backend started")


# -------------------------------------------------------------------
# Routers
# -------------------------------------------------------------------
app.include_router(generate.router,    prefix="/generate-study-pack", tags=["Generate"])
app.include_router(extract.router,     prefix="/extract-pdf",         tags=["Extract"])
app.include_router(chat.router,        prefix="/chat",                tags=["Chat"])
app.include_router(packs.router,       prefix="/packs",               tags=["Packs"])
app.include_router(preferences.router, prefix="/preferences",         tags=["Preferences"])
app.include_router(health.router,      prefix="/health",              tags=["Health"])


# -------------------------------------------------------------------
# Root endpoint
# -------------------------------------------------------------------
@app.get("/")
async def root():
    return {
        "status": "ok",
        "message": "StudyPack Generator API is running",
        "version": "0.1.0",
    }
