from fastapi import APIRouter

from studypack.config import get_api_key

router = APIRouter()

@router.get("")
async def health():
    return {
        "status": "ok",
        "message": "StudyPack backend is running",
        "llm_configured": bool(get_api_key()),
    }
