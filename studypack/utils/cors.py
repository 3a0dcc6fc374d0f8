from fastapi import Request, Response

from studypack.config import CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
}


async def empty_preflight(request: Request, call_next):
    """
    Answer every OPTIONS request with an empty 200.
    CORSMiddleware handles the headers on all other responses.
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=PREFLIGHT_HEADERS)
    return await call_next(request)
