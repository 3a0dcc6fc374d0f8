"""
Shared fixtures: a fake LLM gateway behind httpx.MockTransport,
a temporary data directory and a TestClient wired to both.
"""
import json
import copy

import httpx
import pytest
from fastapi.testclient import TestClient
from openai import AsyncOpenAI

from studypack.main import app
from studypack.services import openai_client
from studypack.services.file_storage import (
    PackStore,
    PreferenceStore,
    get_pack_store,
    get_preference_store,
)


SAMPLE_PACK = {
    "meta": {
        "subject": "Biology",
        "grade": "8",
        "chapter_title": "Photosynthesis",
        "language": "English",
    },
    "summary": {
        "tl_dr": "Plants turn light into chemical energy. Oxygen is released as a by-product.",
        "important_points": [
            "Photosynthesis happens in chloroplasts.",
            "Chlorophyll absorbs light energy.",
        ],
    },
    "notes": [
        {"title": "Where it happens", "content": "In the chloroplasts of leaf cells."},
    ],
    "key_terms": [
        {"term": "Chlorophyll", "meaning": "Green pigment that absorbs light", "example": "Leaves look green"},
        {"term": "Stomata", "meaning": "Pores on the leaf surface"},
    ],
    "flashcards": [
        {"q": "What gas do plants absorb?", "a": "Carbon dioxide"},
    ],
    "quiz": {
        "instructions": "Choose the best answer.",
        "questions": [
            {
                "id": 1,
                "question": "Which organelle performs photosynthesis?",
                "options": ["Nucleus", "Chloroplast", "Ribosome", "Vacuole"],
                "correct_index": 1,
                "explanation": "Chloroplasts contain chlorophyll.",
                "difficulty": "easy",
            },
        ],
    },
    "important_questions": [
        {"question": "Define photosynthesis.", "answer": "Making food from light.", "marks": 1},
        {"question": "Explain the role of stomata.", "answer": "Gas exchange through leaf pores.", "marks": 3},
        {"question": "Describe the light reactions.", "answer": "Light splits water, making ATP and NADPH.", "marks": 5},
    ],
}

CHAPTER_TEXT = (
    "Photosynthesis is the process by which green plants use sunlight, water and "
    "carbon dioxide to make glucose and release oxygen."
)


@pytest.fixture
def sample_pack():
    return copy.deepcopy(SAMPLE_PACK)


def completion(message: dict) -> dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "test-model",
        "choices": [{"index": 0, "finish_reason": "stop", "message": message}],
    }


def tool_call_completion(arguments: str, name: str = "create_study_pack") -> dict:
    return completion({
        "role": "assistant",
        "content": None,
        "tool_calls": [{
            "id": "call_1",
            "type": "function",
            "function": {"name": name, "arguments": arguments},
        }],
    })


def text_completion(text) -> dict:
    return completion({"role": "assistant", "content": text})


def sse_body(*events) -> bytes:
    """Build an upstream SSE body; strings are sent as raw data payloads."""
    frames = []
    for event in events:
        payload = event if isinstance(event, str) else json.dumps(event)
        frames.append(f"data: {payload}\n\n")
    return "".join(frames).encode("utf-8")


def delta(text: str) -> dict:
    return {"choices": [{"delta": {"content": text}}]}


class FakeGateway:
    """
    Records every upstream request and answers with `self.response`,
    which may be an httpx.Response or a callable(request) -> Response.
    """

    def __init__(self):
        self.requests = []
        self.response = httpx.Response(500)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if callable(self.response):
            return self.response(request)
        return self.response

    def respond_json(self, body: dict, status_code: int = 200):
        self.response = httpx.Response(status_code, json=body)

    def respond_stream(self, body, status_code: int = 200):
        self.response = lambda request: httpx.Response(
            status_code,
            headers={"content-type": "text/event-stream"},
            content=body,
        )

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def openai_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key="injected-key",
            base_url="https://gateway.test/v1",
            max_retries=0,
            http_client=self.client(),
        )


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def gateway(monkeypatch):
    fake = FakeGateway()
    monkeypatch.setattr(openai_client, "make_http_client", fake.client)
    return fake


@pytest.fixture
def stores(tmp_path):
    return PackStore(str(tmp_path)), PreferenceStore(str(tmp_path))


@pytest.fixture
def client(stores):
    pack_store, preference_store = stores
    app.dependency_overrides[get_pack_store] = lambda: pack_store
    app.dependency_overrides[get_preference_store] = lambda: preference_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
