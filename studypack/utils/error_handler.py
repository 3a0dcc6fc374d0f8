import traceback
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from studypack.utils.logger import logger


# -------------------------------------------------------------------
# Error taxonomy
# -------------------------------------------------------------------
class StudyPackError(Exception):
    """
    Base error for every failure that is reported to the caller.
    Rendered as {"error": message} with `status_code`.
    """

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(StudyPackError):
    status_code = 500
    default_message = "Server is not configured"


class MissingPayload(StudyPackError):
    status_code = 400
    default_message = "Missing request payload"


class InsufficientContent(StudyPackError):
    status_code = 400
    default_message = "Please provide more content to analyze (at least 50 characters)"


class InsufficientExtraction(StudyPackError):
    status_code = 400
    default_message = (
        "Could not extract sufficient text from the PDF. "
        "Please try copying the text manually."
    )

    def __init__(self, extracted_text: str = "", message: Optional[str] = None):
        super().__init__(message)
        self.extracted_text = extracted_text

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "extractedText": self.extracted_text}


class RateLimited(StudyPackError):
    status_code = 429
    default_message = "Rate limit exceeded. Please try again in a moment."


class QuotaExceeded(StudyPackError):
    status_code = 402
    default_message = "Usage limit reached. Please add credits to continue."


class UpstreamError(StudyPackError):
    status_code = 500

    def __init__(self, upstream_status: int, message: Optional[str] = None):
        super().__init__(message or f"AI gateway error: {upstream_status}")
        self.upstream_status = upstream_status


class InvalidUpstreamResponse(StudyPackError):
    status_code = 500
    default_message = "Invalid response from AI"


class PackNotFound(StudyPackError):
    status_code = 404
    default_message = "Study pack not found"


class Unauthorized(StudyPackError):
    status_code = 401
    default_message = "Missing X-User-Id header"


def upstream_error_for(status: int, allow_quota: bool = True) -> StudyPackError:
    """
    Map a non-success upstream HTTP status onto the taxonomy.
    The extractor passes allow_quota=False: a 402 there is a plain upstream error.
    """
    if status == 429:
        return RateLimited()
    if status == 402 and allow_quota:
        return QuotaExceeded()
    return UpstreamError(status)


# -------------------------------------------------------------------
# FastAPI handlers
# -------------------------------------------------------------------
async def handle_study_pack_error(request: Request, exc: StudyPackError):
    logger.warning(
        f"[ERROR] {request.method} {request.url.path} → "
        f"{exc.status_code} {type(exc).__name__}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"

    logger.warning(f"[ERROR] {request.url.path} validation failed: {message}")
    return JSONResponse(status_code=400, content={"error": message})


async def log_exceptions(request: Request, call_next):
    try:
        return await call_next(request)

    except Exception:
        logger.error("=== GLOBAL ERROR ===")
        logger.error(f"Path: {request.url.path}")
        logger.error(traceback.format_exc())

        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )
