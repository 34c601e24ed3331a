"""Configuration settings for the drawing analysis assistant."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
REPO_ROOT = BASE_DIR.parent

# Package-level .env first, then the repository root.
load_dotenv(BASE_DIR / ".env")
load_dotenv(REPO_ROOT / ".env")


def _int_from_env(var_name: str, default: int) -> int:
    """Return an integer environment value or a default when parsing fails."""

    raw_value = os.environ.get(var_name)
    if raw_value is None:
        return default

    try:
        return int(raw_value)
    except ValueError:
        logging.getLogger(__name__).warning(
            "Invalid integer for %s: %s. Using default %s.",
            var_name,
            raw_value,
            default,
        )
        return default


def _float_from_env(var_name: str, default: float) -> float:
    """Return a float environment value or a default when parsing fails."""

    raw_value = os.environ.get(var_name)
    if raw_value is None:
        return default

    try:
        return float(raw_value)
    except ValueError:
        logging.getLogger(__name__).warning(
            "Invalid float for %s: %s. Using default %s.",
            var_name,
            raw_value,
            default,
        )
        return default


def _bool_from_env(var_name: str, default: bool) -> bool:
    """Return a boolean environment value or a default when missing."""

    raw_value = os.environ.get(var_name)
    if raw_value is None:
        return default

    return raw_value.strip().lower() in {"1", "true", "yes"}


def _list_from_env(var_name: str, default: List[str]) -> List[str]:
    """Return a comma separated environment value as a list."""

    raw_value = os.environ.get(var_name)
    if raw_value is None:
        return list(default)

    return [item.strip() for item in raw_value.split(",") if item.strip()]


# =============================================================================
# MODEL PROVIDER
# =============================================================================
AI_PROVIDER = os.environ.get("AI_PROVIDER", "ollama").strip().lower()

OLLAMA_HOST = os.environ.get("OLLAMA_HOST", "http://localhost:11434")
OLLAMA_TIMEOUT_SECONDS = _float_from_env("OLLAMA_TIMEOUT_SECONDS", 300.0)

# Accept Google's default env var name as well.
_RAW_GEMINI_KEY = os.environ.get("GEMINI_API_KEY")
_RAW_GOOGLE_KEY = os.environ.get("GOOGLE_API_KEY")
GEMINI_API_KEY = _RAW_GEMINI_KEY or _RAW_GOOGLE_KEY
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

# =============================================================================
# UPLOADS & IMAGES
# =============================================================================
MAX_FILE_SIZE = _int_from_env("MAX_FILE_SIZE", 10 * 1024 * 1024)  # 10MB
UPLOAD_DIR = os.environ.get("UPLOAD_DIR") or str(REPO_ROOT / "uploads")
ALLOWED_IMAGE_TYPES = _list_from_env(
    "ALLOWED_IMAGE_TYPES",
    ["image/jpeg", "image/png", "image/gif", "image/webp"],
)
IMAGE_MAX_DIMENSION = _int_from_env("IMAGE_MAX_DIMENSION", 1600)
IMAGE_JPEG_QUALITY = _int_from_env("IMAGE_JPEG_QUALITY", 85)

# =============================================================================
# SERVER SETTINGS
# =============================================================================
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = _int_from_env("PORT", 5000)
RELOAD = _bool_from_env("RELOAD", False)
CORS_ORIGINS = _list_from_env("CORS_ORIGINS", ["*"])

# =============================================================================
# LOGGING
# =============================================================================
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# =============================================================================
# VALIDATION
# =============================================================================
def validate_config():
    """Validate configuration and log status"""
    logger = logging.getLogger(__name__)

    logger.info("=" * 70)
    logger.info("CONFIGURATION CHECK:")
    logger.info("  AI Provider: %s", AI_PROVIDER)
    if AI_PROVIDER == "ollama":
        logger.info("  Ollama Host: %s", OLLAMA_HOST)
    elif AI_PROVIDER == "gemini":
        if GEMINI_API_KEY:
            source = "GEMINI_API_KEY" if _RAW_GEMINI_KEY else "GOOGLE_API_KEY"
            logger.info("  Gemini API Key: SET (source: %s)", source)
        else:
            logger.warning("  Gemini API Key: NOT SET - fallback analysis only")
        logger.info("  Gemini Model: %s", GEMINI_MODEL)
    else:
        logger.error("  Unknown AI_PROVIDER '%s' (expected 'ollama' or 'gemini')", AI_PROVIDER)
    logger.info("  Upload Directory: %s", UPLOAD_DIR)
    logger.info("  Max Upload Size: %.1f MB", MAX_FILE_SIZE / 1024 / 1024)
    logger.info("=" * 70)

    return {
        "ai_provider": AI_PROVIDER,
        "gemini_configured": bool(GEMINI_API_KEY),
        "upload_dir": UPLOAD_DIR,
        "max_file_size": MAX_FILE_SIZE,
    }
