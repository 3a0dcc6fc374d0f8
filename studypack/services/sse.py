"""
Incremental decoder for OpenAI-style Server-Sent-Events streams.

Upstream frames look like:

    data: {"choices":[{"delta":{"content":"Hel"}}]}

    data: [DONE]

A frame can be split across network reads, so partial lines are
buffered until their newline arrives.
"""
import json
from typing import AsyncIterable, AsyncIterator, List

DATA_PREFIX = "data:"
DONE_MARKER = "[DONE]"

# Returned by parse_data_line for the terminator line
DONE = object()

DONE_FRAME = f"{DATA_PREFIX} {DONE_MARKER}\n\n"


class SSEDecoder:
    def __init__(self):
        self._buffer = ""

    def feed(self, chunk: str) -> List[str]:
        """Add a chunk and return every line it completed."""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> List[str]:
        rest, self._buffer = self._buffer.rstrip("\r"), ""
        return [rest] if rest else []


def parse_data_line(line: str):
    """
    DONE for the terminator, the delta text for a content frame,
    None for anything else (blank lines, comments, bad JSON).
    """
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_MARKER:
        return DONE

    try:
        event = json.loads(payload)
        content = event["choices"][0]["delta"].get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        return None

    if isinstance(content, str) and content:
        return content
    return None


async def iter_fragments(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    """
    Yield token fragments in arrival order until the terminator
    or the end of the stream.
    """
    decoder = SSEDecoder()

    async for chunk in chunks:
        for line in decoder.feed(chunk):
            fragment = parse_data_line(line)
            if fragment is DONE:
                return
            if fragment:
                yield fragment

    for line in decoder.flush():
        fragment = parse_data_line(line)
        if fragment is DONE:
            return
        if fragment:
            yield fragment


def encode_fragment(text: str) -> str:
    event = {"choices": [{"delta": {"content": text}}]}
    return f"{DATA_PREFIX} {json.dumps(event, ensure_ascii=False)}\n\n"
