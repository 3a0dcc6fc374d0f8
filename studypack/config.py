import os
from pathlib import Path
from dotenv import load_dotenv

# ----------------------------
# Load .env file (if exists)
# ----------------------------
load_dotenv()

# ----------------------------
# Base directories
# ----------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Study packs and preferences are stored as JSON under this directory
DATA_DIR = os.getenv("DATA_DIR", str(BASE_DIR / "data"))

# ----------------------------
# LLM gateway configuration
# ----------------------------
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://ai.gateway.lovable.dev/v1").rstrip("/")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "120"))

STUDY_PACK_MODEL = os.getenv("STUDY_PACK_MODEL", "google/gemini-2.5-flash-lite")
EXTRACT_MODEL = os.getenv("EXTRACT_MODEL", "google/gemini-2.5-flash")
CHAT_MODEL = os.getenv("CHAT_MODEL", "google/gemini-2.5-flash")

# ----------------------------
# Content limits
# ----------------------------
MIN_CONTENT_CHARS = 50
MIN_EXTRACTED_CHARS = 50

# Generator prompt is cut to this many characters of source content
MAX_CONTENT_CHARS = int(os.getenv("MAX_CONTENT_CHARS", "4000"))

# ----------------------------
# CORS
# ----------------------------
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type", "x-user-id"]
CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]

API_KEY_VARS = ("LLM_API_KEY", "OPENAI_API_KEY")

if not any(os.getenv(name) for name in API_KEY_VARS):
    print("WARNING: LLM_API_KEY is not set. LLM features will not work.")


def get_api_key():
    """
    Read the upstream credential at request time.
    Returns None when it is not configured.
    """
    for name in API_KEY_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None
