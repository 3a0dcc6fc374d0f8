from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from studypack.schemas.chat import ChatRequest
from studypack.services.chat_relay import ChatRelay

router = APIRouter()


@router.post("")
async def chat(payload: ChatRequest):
    """
    Stream the assistant reply as SSE frames ending with `data: [DONE]`.
    Upstream errors before the first frame come back as JSON errors.
    """
    frames = await ChatRelay().open(payload)

    return StreamingResponse(
        frames,
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
