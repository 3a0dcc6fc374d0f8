"""
Function declaration the generator forces the model to call.
Kept as plain data: it is sent verbatim as the `tools` entry.
"""

STUDY_PACK_FUNCTION_NAME = "create_study_pack"

STUDY_PACK_TOOL = {
    "type": "function",
    "function": {
        "name": STUDY_PACK_FUNCTION_NAME,
        "description": "Generate a comprehensive study pack with summary, notes, terms, flashcards, and quiz",
        "parameters": {
            "type": "object",
            "properties": {
                "meta": {
                    "type": "object",
                    "properties": {
                        "subject": {"type": "string"},
                        "grade": {"type": "string"},
                        "chapter_title": {"type": "string"},
                        "language": {"type": "string"},
                    },
                    "required": ["subject", "grade", "chapter_title", "language"],
                },
                "summary": {
                    "type": "object",
                    "properties": {
                        "tl_dr": {"type": "string", "description": "A concise 2-3 sentence summary"},
                        "important_points": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Key takeaways",
                        },
                    },
                    "required": ["tl_dr", "important_points"],
                },
                "notes": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "title": {"type": "string"},
                            "content": {"type": "string", "description": "Brief explanation, 2-3 sentences"},
                        },
                        "required": ["title", "content"],
                    },
                    "description": "Note sections",
                },
                "key_terms": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "term": {"type": "string"},
                            "meaning": {"type": "string"},
                            "example": {"type": "string", "description": "Short usage example"},
                        },
                        "required": ["term", "meaning"],
                    },
                    "description": "Key terms",
                },
                "flashcards": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "q": {"type": "string", "description": "Question"},
                            "a": {"type": "string", "description": "Answer"},
                        },
                        "required": ["q", "a"],
                    },
                    "description": "Flashcards",
                },
                "quiz": {
                    "type": "object",
                    "properties": {
                        "instructions": {"type": "string"},
                        "questions": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "id": {"type": "integer"},
                                    "question": {"type": "string"},
                                    "options": {
                                        "type": "array",
                                        "items": {"type": "string"},
                                        "minItems": 4,
                                        "maxItems": 4,
                                        "description": "4 options",
                                    },
                                    "correct_index": {
                                        "type": "integer",
                                        "minimum": 0,
                                        "maximum": 3,
                                        "description": "0-3",
                                    },
                                    "explanation": {"type": "string"},
                                    "difficulty": {"type": "string", "enum": ["easy", "medium", "hard"]},
                                },
                                "required": ["id", "question", "options", "correct_index", "explanation", "difficulty"],
                            },
                        },
                    },
                    "required": ["instructions", "questions"],
                    "description": "Multiple-choice quiz",
                },
                "important_questions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "question": {"type": "string", "description": "An important exam question"},
                            "answer": {"type": "string", "description": "Model answer for the question"},
                            "marks": {"type": "integer", "enum": [1, 3, 5], "description": "1, 3, or 5 marks"},
                        },
                        "required": ["question", "answer", "marks"],
                    },
                    "description": "9 important questions: 3 one-mark, 3 three-mark, 3 five-mark",
                },
            },
            "required": ["meta", "summary", "notes", "key_terms", "flashcards", "quiz", "important_questions"],
            "additionalProperties": False,
        },
    },
}

STUDY_PACK_TOOL_CHOICE = {
    "type": "function",
    "function": {"name": STUDY_PACK_FUNCTION_NAME},
}
