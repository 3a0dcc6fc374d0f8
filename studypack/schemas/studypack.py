from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from studypack.config import MIN_CONTENT_CHARS


# -------------------------------------------------------------------
# Request
# -------------------------------------------------------------------
class StudyPackRequest(BaseModel):
    grade: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    chapterTitle: str = Field(..., min_length=1)
    language: str = "English"
    chapterText: str = ""
    extractedPdfText: str = ""

    @field_validator("grade", "subject", "chapterTitle")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("language", mode="before")
    @classmethod
    def default_language(cls, value):
        if value is None:
            return "English"
        if isinstance(value, str):
            return value.strip() or "English"
        return value

    @field_validator("chapterText", "extractedPdfText", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    def select_content(self) -> str:
        """
        PDF extraction is preferred over pasted text whenever it is non-blank.
        """
        if self.extractedPdfText.strip():
            return self.extractedPdfText
        return self.chapterText

    def has_sufficient_content(self) -> bool:
        return len(self.select_content().strip()) >= MIN_CONTENT_CHARS


# -------------------------------------------------------------------
# Generated pack
# -------------------------------------------------------------------
class PackMeta(BaseModel):
    subject: str
    grade: str
    chapter_title: str
    language: str


class Summary(BaseModel):
    tl_dr: str
    important_points: List[str]


class NoteSection(BaseModel):
    title: str
    content: str


class KeyTerm(BaseModel):
    term: str
    meaning: str
    example: Optional[str] = None


class Flashcard(BaseModel):
    q: str
    a: str


class QuizQuestion(BaseModel):
    id: int
    question: str
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_index: int = Field(..., ge=0, le=3)
    explanation: str
    difficulty: Literal["easy", "medium", "hard"]

    @model_validator(mode="after")
    def correct_index_in_options(self):
        if self.correct_index >= len(self.options):
            raise ValueError("correct_index must index into options")
        return self


class Quiz(BaseModel):
    instructions: str
    questions: List[QuizQuestion]


class ImportantQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    marks: Literal[1, 3, 5]


class MindMap(BaseModel):
    mermaidCode: str


class StudyPackData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    meta: PackMeta
    summary: Summary
    notes: List[NoteSection]
    key_terms: List[KeyTerm]
    flashcards: List[Flashcard]
    quiz: Quiz
    important_questions: Optional[List[ImportantQuestion]] = None
    mind_map: Optional[MindMap] = None


class StoredPack(StudyPackData):
    id: str
    user_id: str
    created_at: datetime

    def to_pack_data(self) -> StudyPackData:
        return StudyPackData.model_validate(
            self.model_dump(exclude={"id", "user_id", "created_at"})
        )


class GeneratePackRequest(StudyPackRequest):
    """
    Generate-and-save request: the pack fields plus an optional PDF.
    """
    pdfBase64: Optional[str] = None
