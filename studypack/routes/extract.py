from fastapi import APIRouter

from studypack.schemas.chat import ExtractRequest
from studypack.services.pdf_extractor import extract_pdf_text
from studypack.utils.logger import logger

router = APIRouter()


@router.post("")
async def extract_pdf(payload: ExtractRequest):
    logger.info("[EXTRACT] Request received")
    text = await extract_pdf_text(payload.pdfBase64)
    return {"text": text}
