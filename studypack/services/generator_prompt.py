# studypack/services/generator_prompt.py

from studypack.config import MAX_CONTENT_CHARS

# Cardinality targets written into the user prompt
TARGET_KEY_POINTS = 10
TARGET_NOTES = 6
TARGET_TERMS = 12
TARGET_FLASHCARDS = 12
TARGET_QUIZ_QUESTIONS = 10
TARGET_QUESTIONS_PER_MARK = 3


def truncate_content(content: str, limit: int = MAX_CONTENT_CHARS) -> str:
    """
    Keep only the first `limit` characters of the source.
    Lossy on purpose: bounds prompt size and therefore latency.
    """
    return content[:limit]


def build_system_prompt(language: str, grade: str, subject: str, topic: str) -> str:
    return f"""You are an expert educational content creator specializing in creating comprehensive study materials for students. Your task is to analyze the provided content and create a complete study pack.

Guidelines:
- Use the specified language: {language}
- Tailor content to grade level: {grade}
- Subject: {subject}
- Chapter/Topic: {topic}
- Be accurate, engaging, and educational
- Create content that helps students understand and retain information
- Include varied difficulty levels in quiz questions"""


def build_user_prompt(language: str, grade: str, subject: str, topic: str, content: str) -> str:
    q = TARGET_QUESTIONS_PER_MARK
    return f"""Create a study pack from this content. Be concise.

GRADE: {grade} | SUBJECT: {subject} | TOPIC: {topic} | LANGUAGE: {language}

CONTENT:
{content}

Generate: TL;DR (2 sentences), {TARGET_KEY_POINTS} key points, {TARGET_NOTES} notes, {TARGET_TERMS} terms, {TARGET_FLASHCARDS} flashcards, {TARGET_QUIZ_QUESTIONS} quiz questions (easy/medium/hard mix), and {q * 3} important questions ({q} one-mark short answer, {q} three-mark medium answer, {q} five-mark detailed answer)."""


def build_prompt(language: str, grade: str, subject: str, topic: str, content: str) -> list:
    """
    System/user message pair for study pack generation.
    """
    return [
        {"role": "system", "content": build_system_prompt(language, grade, subject, topic)},
        {"role": "user", "content": build_user_prompt(language, grade, subject, topic, content)},
    ]
