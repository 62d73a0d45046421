"""OpenAI-compatible /audio/transcriptions backend."""

from __future__ import annotations

import logging

import requests

from siyuan_transcribe.core.errors import MissingCredential, TranscriptionApiError

LOG = logging.getLogger("siyuan_transcribe")

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "whisper-1"
API_VERSION_SUFFIX = "/v1"
TRANSCRIPTIONS_PATH = "/audio/transcriptions"


def normalize_base_url(base_url: str | None) -> str:
    """Return the service root with exactly one trailing ``/v1`` segment."""
    trimmed = (base_url or "").strip()
    if not trimmed:
        return DEFAULT_BASE_URL
    without_slash = trimmed.rstrip("/")
    if without_slash.endswith(API_VERSION_SUFFIX):
        return without_slash
    return without_slash + API_VERSION_SUFFIX


def transcriptions_endpoint(base_url: str | None) -> str:
    return normalize_base_url(base_url) + TRANSCRIPTIONS_PATH


def build_form_fields(options) -> dict[str, str]:
    """Non-file multipart fields: model always, language only when set."""
    fields = {"model": (options.model or "").strip() or DEFAULT_MODEL}
    language = (options.language or "").strip()
    if language:
        fields["language"] = language
    return fields


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"API error: {response.reason or response.status_code}"


class OpenAITranscriptionBackend:
    """Single-attempt multipart upload to an OpenAI-compatible endpoint."""

    def __init__(self, session: requests.Session | None = None, timeout: float | None = None):
        self.session = session or requests.Session()
        self.timeout = timeout

    def transcribe(self, audio, options) -> str:
        """Upload *audio* and return the ``text`` field of the response."""
        if not (options.api_key or "").strip():
            raise MissingCredential()

        url = transcriptions_endpoint(options.base_url)
        headers = {"Authorization": f"Bearer {options.api_key}"}
        files = {"file": (audio.filename, audio.data, audio.content_type or None)}
        fields = build_form_fields(options)

        LOG.debug(f"POST {url} file={audio.filename} fields={fields}")
        try:
            response = self.session.post(url, headers=headers, data=fields, files=files, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TranscriptionApiError(f"Request to transcription API failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            message = _error_message(response)
            LOG.warning(f"Transcription API returned {response.status_code}: {message}")
            raise TranscriptionApiError(message, status_code=response.status_code)

        try:
            result = response.json()
        except ValueError as exc:
            raise TranscriptionApiError(
                "Invalid response from transcription API", status_code=response.status_code
            ) from exc

        if not isinstance(result, dict):
            return ""
        return result.get("text") or ""
