from fastapi import APIRouter

from studypack.schemas.studypack import StudyPackRequest
from studypack.services.llm_study import generate_study_pack
from studypack.utils.logger import logger

router = APIRouter()


@router.post("")
async def generate(payload: StudyPackRequest):
    """
    Generate a study pack from pasted text or previously extracted PDF text.
    Nothing is persisted here.
    """
    logger.info(
        f"[GENERATE] Start → subject='{payload.subject}' grade='{payload.grade}' "
        f"topic='{payload.chapterTitle}'"
    )

    pack = await generate_study_pack(payload)

    logger.info("[GENERATE] Completed successfully")
    return pack
