from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    context: Optional[str] = None
    # Full conversation so far; the server keeps no session
    history: List[ChatTurn] = []


class ExtractRequest(BaseModel):
    pdfBase64: Optional[str] = None
