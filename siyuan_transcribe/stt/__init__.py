"""Speech-to-text backend abstractions and implementations."""

from siyuan_transcribe.stt.base import TranscriptionBackend
from siyuan_transcribe.stt.openai_backend import OpenAITranscriptionBackend, normalize_base_url

__all__ = ["TranscriptionBackend", "OpenAITranscriptionBackend", "normalize_base_url"]
