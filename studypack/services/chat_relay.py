from typing import AsyncIterator, List, Optional

import httpx

from studypack.config import CHAT_MODEL, LLM_BASE_URL
from studypack.schemas.chat import ChatRequest, ChatTurn
from studypack.services import openai_client
from studypack.services.sse import DONE_FRAME, encode_fragment, iter_fragments
from studypack.utils.error_handler import UpstreamError, upstream_error_for
from studypack.utils.logger import logger


CHAT_SYSTEM_PROMPT = (
    "You are a friendly study assistant helping a student understand their course material. "
    "Explain concepts clearly and simply, use short examples, and keep answers focused on the "
    "student's question. If you are not sure about something, say so."
)

CHAT_APOLOGY = "Sorry, I had trouble responding. Please try again."


def build_chat_messages(message: str, context: Optional[str], history: List[ChatTurn]) -> list:
    """
    System prompt, then the replayed history, then the new message.
    """
    system_prompt = CHAT_SYSTEM_PROMPT
    if context and context.strip():
        system_prompt += f"\n\nThe student is asking about: {context.strip()}"

    messages = [{"role": "system", "content": system_prompt}]
    messages.extend({"role": turn.role, "content": turn.content} for turn in history)
    messages.append({"role": "user", "content": message})
    return messages


class ChatRelay:
    """
    Proxies one chat request to the gateway as a token stream.

    `open()` returns only after the upstream accepted the request, so
    errors before the first byte still become regular HTTP errors.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._http_client = http_client

    async def _release(self, client: httpx.AsyncClient):
        # an injected client belongs to the caller
        if client is not self._http_client:
            await client.aclose()

    async def open(self, request: ChatRequest) -> AsyncIterator[str]:
        api_key = openai_client.require_api_key()
        client = self._http_client or openai_client.make_http_client()

        payload = {
            "model": CHAT_MODEL,
            "messages": build_chat_messages(request.message, request.context, request.history),
            "stream": True,
        }

        logger.info(
            f"[CHAT] Opening stream: history={len(request.history)} turns, "
            f"context={'yes' if request.context else 'no'}"
        )

        upstream_request = client.build_request(
            "POST",
            f"{LLM_BASE_URL}/chat/completions",
            headers={"Authorization": f"Bearer {api_key}"},
            json=payload,
        )

        try:
            response = await client.send(upstream_request, stream=True)
        except httpx.HTTPError as e:
            await self._release(client)
            logger.error(f"[CHAT] Could not reach gateway: {e}")
            raise UpstreamError(502, "Could not reach AI gateway") from e

        if not response.is_success:
            body = await response.aread()
            await response.aclose()
            await self._release(client)
            logger.error(f"[CHAT] Gateway returned HTTP {response.status_code}: {body[:500]!r}")
            raise upstream_error_for(response.status_code)

        return self._relay(client, response)

    async def _relay(self, client: httpx.AsyncClient, response: httpx.Response) -> AsyncIterator[str]:
        forwarded = 0
        try:
            try:
                async for fragment in iter_fragments(response.aiter_text()):
                    forwarded += 1
                    yield encode_fragment(fragment)
            except Exception:
                # Headers are already sent; report the failure in-band
                logger.exception(f"[CHAT] Stream failed after {forwarded} fragments")
                yield encode_fragment(CHAT_APOLOGY)

            yield DONE_FRAME
            logger.info(f"[CHAT] Stream completed, {forwarded} fragments")

        finally:
            await response.aclose()
            await self._release(client)
