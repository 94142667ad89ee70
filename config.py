import os
from dotenv import load_dotenv
load_dotenv()


def _csv(name, default):
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///cv_evaluator.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 20 * 1024 * 1024))

    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    EVALUATION_QUEUE = os.getenv("EVALUATION_QUEUE", "evaluation_queue")
    QUEUE_PUBLISH_TIMEOUT = float(os.getenv("QUEUE_PUBLISH_TIMEOUT", 5))
    EVALUATION_JOB_TIMEOUT = int(os.getenv("EVALUATION_JOB_TIMEOUT", 600))

    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_EVALUATION_MODELS = _csv("GEMINI_EVALUATION_MODELS", [
        "gemini-2.0-flash-001",
        "gemini-2.0-flash",
        "gemini-2.5-flash",
        "gemini-2.5-flash-preview-09-2025",
        "gemini-flash-latest",
    ])
    GEMINI_EXTRACTION_MODELS = _csv("GEMINI_EXTRACTION_MODELS", [
        "gemini-2.0-flash-001",
        "gemini-2.0-flash",
        "gemini-2.5-flash",
        "gemini-flash-latest",
    ])
    GEMINI_SCORING_TIMEOUT = float(os.getenv("GEMINI_SCORING_TIMEOUT", 30))
    GEMINI_EXTRACTION_TIMEOUT = float(os.getenv("GEMINI_EXTRACTION_TIMEOUT", 120))

    # byte limits for the best-effort text fallbacks
    RAW_TEXT_LIMIT = int(os.getenv("RAW_TEXT_LIMIT", 5000))
    UNKNOWN_TEXT_LIMIT = int(os.getenv("UNKNOWN_TEXT_LIMIT", 10000))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    STALE_PROCESSING_MINUTES = int(os.getenv("STALE_PROCESSING_MINUTES", 30))
