from typing import List

from fastapi import APIRouter, Depends, status

from studypack.schemas.studypack import GeneratePackRequest, StoredPack, StudyPackData
from studypack.services.file_storage import PackStore, get_pack_store
from studypack.services.llm_study import generate_study_pack
from studypack.services.pdf_extractor import extract_pdf_text
from studypack.utils.error_handler import (
    ConfigurationError,
    QuotaExceeded,
    RateLimited,
    StudyPackError,
)
from studypack.utils.identity import get_user_id
from studypack.utils.logger import logger

router = APIRouter()

# Extraction failures that are not worth falling back from
FATAL_EXTRACTION_ERRORS = (ConfigurationError, RateLimited, QuotaExceeded)


@router.get("", response_model=List[StoredPack])
async def list_packs(
    user_id: str = Depends(get_user_id),
    store: PackStore = Depends(get_pack_store),
):
    return store.list(user_id)


@router.get("/{pack_id}", response_model=StoredPack)
async def get_pack(
    pack_id: str,
    user_id: str = Depends(get_user_id),
    store: PackStore = Depends(get_pack_store),
):
    return store.get(user_id, pack_id)


@router.post("", response_model=StoredPack, status_code=status.HTTP_201_CREATED)
async def save_pack(
    payload: StudyPackData,
    user_id: str = Depends(get_user_id),
    store: PackStore = Depends(get_pack_store),
):
    return store.create(user_id, payload)


@router.delete("/{pack_id}")
async def delete_pack(
    pack_id: str,
    user_id: str = Depends(get_user_id),
    store: PackStore = Depends(get_pack_store),
):
    return {"deleted": store.delete(user_id, pack_id)}


@router.post("/generate", response_model=StoredPack, status_code=status.HTTP_201_CREATED)
async def generate_and_save(
    payload: GeneratePackRequest,
    user_id: str = Depends(get_user_id),
    store: PackStore = Depends(get_pack_store),
):
    """
    Full flow: optional PDF extraction → generation → save.

    A failed extraction falls back to the pasted chapter text; the
    generator then decides whether there is enough content.
    """
    logger.info(f"[PACKS] Generate-and-save for user {user_id}, pdf={'yes' if payload.pdfBase64 else 'no'}")

    request = payload
    if payload.pdfBase64:
        try:
            text = await extract_pdf_text(payload.pdfBase64)
            request = payload.model_copy(update={"extractedPdfText": text})
        except FATAL_EXTRACTION_ERRORS:
            raise
        except StudyPackError as e:
            logger.warning(f"[PACKS] PDF extraction failed ({e.message}), using provided text")

    data = await generate_study_pack(request)
    pack = store.create(user_id, StudyPackData.model_validate(data))

    logger.info(f"[PACKS] Pack {pack.id} generated and saved")
    return pack
