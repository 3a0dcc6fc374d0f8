import json
from typing import Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from studypack.config import STUDY_PACK_MODEL
from studypack.schemas.studypack import StudyPackData, StudyPackRequest
from studypack.schemas.tool import (
    STUDY_PACK_FUNCTION_NAME,
    STUDY_PACK_TOOL,
    STUDY_PACK_TOOL_CHOICE,
)
from studypack.services.generator_prompt import build_prompt, truncate_content
from studypack.services.openai_client import run_chat_completion
from studypack.utils.error_handler import InsufficientContent, InvalidUpstreamResponse
from studypack.utils.logger import logger


def parse_study_pack(response) -> dict:
    """
    Pull the forced function call out of a chat completion and
    validate its arguments. The parsed object is returned as-is.
    """
    if not response.choices:
        logger.error("[LLM_STUDY] Response has no choices")
        raise InvalidUpstreamResponse()

    tool_calls = response.choices[0].message.tool_calls or []
    if not tool_calls or tool_calls[0].function.name != STUDY_PACK_FUNCTION_NAME:
        logger.error("[LLM_STUDY] Model did not call create_study_pack")
        raise InvalidUpstreamResponse()

    raw = tool_calls[0].function.arguments or ""
    logger.info(f"[LLM_STUDY] Raw arguments (first 200 chars): {raw[:200]}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"[LLM_STUDY] JSON parse error: {e}")
        raise InvalidUpstreamResponse() from e

    try:
        StudyPackData.model_validate(data)
    except ValidationError as e:
        logger.error(f"[LLM_STUDY] Study pack does not match schema: {e.error_count()} errors")
        logger.error(str(e))
        raise InvalidUpstreamResponse("Invalid response from AI: study pack does not match schema") from e

    return data


async def generate_study_pack(request: StudyPackRequest, client: Optional[AsyncOpenAI] = None) -> dict:
    """
    Generate a full study pack for one chapter in a single forced
    function call. Rejects short content before touching the gateway.
    """
    if not request.has_sufficient_content():
        logger.warning("[LLM_STUDY] Content too short, request rejected")
        raise InsufficientContent()

    content = request.select_content()
    truncated = truncate_content(content)

    logger.info(
        f"[LLM_STUDY] Generating study pack: subject='{request.subject}' grade='{request.grade}' "
        f"topic='{request.chapterTitle}' language='{request.language}' "
        f"content={len(content)} chars (sent {len(truncated)})"
    )

    messages = build_prompt(
        language=request.language,
        grade=request.grade,
        subject=request.subject,
        topic=request.chapterTitle,
        content=truncated,
    )

    response = await run_chat_completion(
        client=client,
        model=STUDY_PACK_MODEL,
        messages=messages,
        tools=[STUDY_PACK_TOOL],
        tool_choice=STUDY_PACK_TOOL_CHOICE,
    )

    data = parse_study_pack(response)

    logger.info(
        f"[LLM_STUDY] Study pack ready: {len(data['flashcards'])} flashcards, "
        f"{len(data['quiz']['questions'])} quiz questions"
    )
    return data
