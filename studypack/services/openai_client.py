from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from studypack.config import LLM_BASE_URL, LLM_TIMEOUT, get_api_key
from studypack.utils.error_handler import (
    ConfigurationError,
    StudyPackError,
    UpstreamError,
    upstream_error_for,
)
from studypack.utils.logger import logger


def require_api_key() -> str:
    """
    Credential is checked per request, never at startup.
    """
    api_key = get_api_key()
    if not api_key:
        logger.error("[OPENAI] LLM_API_KEY is not configured")
        raise ConfigurationError("LLM_API_KEY is not configured")
    return api_key


def make_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=LLM_TIMEOUT)


def get_client(api_key: Optional[str] = None) -> AsyncOpenAI:
    """
    OpenAI-compatible client for the configured gateway.
    Retries are disabled: upstream failures go straight back to the caller.
    """
    return AsyncOpenAI(
        api_key=api_key or require_api_key(),
        base_url=LLM_BASE_URL,
        timeout=LLM_TIMEOUT,
        max_retries=0,
        http_client=make_http_client(),
    )


def map_openai_error(exc: openai.OpenAIError, allow_quota: bool = True) -> StudyPackError:
    if isinstance(exc, openai.APIStatusError):
        logger.error(f"[OPENAI] Gateway returned HTTP {exc.status_code}: {exc.message}")
        return upstream_error_for(exc.status_code, allow_quota=allow_quota)

    if isinstance(exc, openai.APITimeoutError):
        logger.error("[OPENAI] Gateway request timed out")
        return UpstreamError(504, "AI gateway timed out")

    logger.error(f"[OPENAI] Gateway request failed: {exc}")
    return UpstreamError(502, "Could not reach AI gateway")


async def run_chat_completion(client: Optional[AsyncOpenAI] = None, allow_quota: bool = True, **params):
    """
    Unified non-streaming chat completion call.
    Closes the client afterwards unless one was passed in.
    """
    owns_client = client is None
    if owns_client:
        client = get_client()

    try:
        logger.info(f"[OPENAI] Request started (model={params.get('model')})")
        response = await client.chat.completions.create(**params)
        logger.info("[OPENAI] Request completed")
        return response

    except openai.OpenAIError as e:
        raise map_openai_error(e, allow_quota=allow_quota) from e

    finally:
        if owns_client:
            await client.close()
