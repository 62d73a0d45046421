"""Application configuration management."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "siyuan-transcribe"
CONFIG_FILE = CONFIG_DIR / "config.json"

API_KEY_ENV = "OPENAI_API_KEY"

DEFAULT_CONFIG = {
    # Transcription service
    "openai_api_key": "",
    "base_url": "",  # Empty means https://api.openai.com/v1
    "model": "whisper-1",
    "language": "",  # Empty lets the service auto-detect
    # SiYuan kernel
    "siyuan_url": "http://127.0.0.1:6806",
    "siyuan_token": "",
    # Behavior
    "copy_on_fallback": True,  # Copy text to clipboard when it cannot be inserted
    "notify_timeout_ms": 7000,
    "request_timeout": None,  # Seconds; None waits as long as the network stack does
}

# Display names accepted for "language" (subset of Whisper's 99 languages)
LANGUAGES = {
    "Auto-detect": None,
    "English": "en",
    "Spanish": "es",
    "French": "fr",
    "German": "de",
    "Italian": "it",
    "Portuguese": "pt",
    "Dutch": "nl",
    "Russian": "ru",
    "Chinese": "zh",
    "Japanese": "ja",
    "Korean": "ko",
    "Arabic": "ar",
    "Hindi": "hi",
}

_STRING_KEYS = ("openai_api_key", "base_url", "model", "language", "siyuan_url", "siyuan_token")

_LOG = logging.getLogger("siyuan_transcribe")


def normalize_language(language):
    """Map a display name to its code; codes and unknown values pass through."""
    value = (language or "").strip()
    for name, code in LANGUAGES.items():
        if value.lower() == name.lower():
            return code or ""
    return value


def normalize_config(config):
    """Fill defaults and coerce values into the shapes the app expects."""
    normalized = DEFAULT_CONFIG.copy()
    if isinstance(config, dict):
        normalized.update(config)

    for key in _STRING_KEYS:
        value = normalized.get(key)
        normalized[key] = value.strip() if isinstance(value, str) else DEFAULT_CONFIG[key]

    normalized["model"] = normalized["model"] or DEFAULT_CONFIG["model"]
    normalized["siyuan_url"] = (normalized["siyuan_url"] or DEFAULT_CONFIG["siyuan_url"]).rstrip("/")
    normalized["language"] = normalize_language(normalized["language"])
    normalized["copy_on_fallback"] = bool(normalized.get("copy_on_fallback"))

    timeout_ms = normalized.get("notify_timeout_ms")
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
        normalized["notify_timeout_ms"] = DEFAULT_CONFIG["notify_timeout_ms"]

    request_timeout = normalized.get("request_timeout")
    if isinstance(request_timeout, bool) or not isinstance(request_timeout, (int, float)) or request_timeout <= 0:
        normalized["request_timeout"] = None
    return normalized


def resolve_api_key(config):
    """Return the configured API key, falling back to the environment."""
    return (config.get("openai_api_key") or os.environ.get(API_KEY_ENV, "")).strip()


def load_config():
    """Load config from file or create default."""
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        if CONFIG_FILE.exists():
            with open(CONFIG_FILE, encoding="utf-8") as f:
                saved = json.load(f)
                return normalize_config(saved)
    except Exception as exc:
        _LOG.warning(f"Failed to load config from {CONFIG_FILE}: {exc}")
    return normalize_config({})


def save_config(config):
    """Save config to file."""
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        normalized = normalize_config(config)
        tmp_path = CONFIG_FILE.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(normalized, f, indent=2)
        tmp_path.replace(CONFIG_FILE)
    except Exception as exc:
        _LOG.warning(f"Failed to save config to {CONFIG_FILE}: {exc}")
