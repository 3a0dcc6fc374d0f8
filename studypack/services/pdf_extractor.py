from typing import Optional

from openai import AsyncOpenAI

from studypack.config import EXTRACT_MODEL, MIN_EXTRACTED_CHARS
from studypack.services.openai_client import run_chat_completion
from studypack.utils.error_handler import InsufficientExtraction, MissingPayload
from studypack.utils.logger import logger


EXTRACT_SYSTEM_PROMPT = (
    "You are a document text extractor. Extract all text content from the provided document. "
    "Preserve the structure and formatting as much as possible. Include headings, paragraphs, "
    "lists, and any other text elements. Do not summarize - extract the full text content."
)

EXTRACT_USER_PROMPT = (
    "Please extract all text content from this PDF document. "
    "Preserve the structure and return the full text."
)


def build_extract_messages(pdf_base64: str) -> list:
    return [
        {"role": "system", "content": EXTRACT_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": EXTRACT_USER_PROMPT},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:application/pdf;base64,{pdf_base64}"},
                },
            ],
        },
    ]


# ---------------------------------------------------------
# Extract text from a base64 PDF with the vision model
# ---------------------------------------------------------
async def extract_pdf_text(pdf_base64: Optional[str], client: Optional[AsyncOpenAI] = None) -> str:
    if not pdf_base64 or not pdf_base64.strip():
        raise MissingPayload("No PDF data provided")

    logger.info(f"[EXTRACT] Extracting PDF text, payload={len(pdf_base64)} base64 chars")

    # 402 maps to a plain upstream error for extraction
    response = await run_chat_completion(
        client=client,
        allow_quota=False,
        model=EXTRACT_MODEL,
        messages=build_extract_messages(pdf_base64.strip()),
    )

    text = ""
    if response.choices:
        text = response.choices[0].message.content or ""

    if len(text) < MIN_EXTRACTED_CHARS:
        logger.warning(f"[EXTRACT] Insufficient text extracted: {len(text)} chars")
        raise InsufficientExtraction(extracted_text=text)

    logger.info(f"[EXTRACT] OK, {len(text)} chars")
    return text
