"""Transcription request pipeline: credential, bytes, filename, upload."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from siyuan_transcribe.core.audio import resolve_audio_file
from siyuan_transcribe.core.config import resolve_api_key
from siyuan_transcribe.core.errors import AudioLoadFailure, HostApiError, MissingCredential
from siyuan_transcribe.platform.base import FileStore
from siyuan_transcribe.stt.base import TranscriptionBackend
from siyuan_transcribe.stt.openai_backend import OpenAITranscriptionBackend

LOG = logging.getLogger("siyuan_transcribe")


@dataclass
class TranscriptionOptions:
    """Per-call settings for the transcription service."""

    api_key: str
    language: str | None = None
    base_url: str | None = None
    model: str | None = None

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=resolve_api_key(config),
            language=config.get("language") or None,
            base_url=config.get("base_url") or None,
            model=config.get("model") or None,
        )


class TranscriptionEngine:
    """Turns an audio reference into text using a file store and a backend."""

    def __init__(self, file_store: FileStore, backend: TranscriptionBackend | None = None):
        self.file_store = file_store
        self.backend: TranscriptionBackend = backend or OpenAITranscriptionBackend()

    def load_audio(self, audio_reference: str):
        """Fetch the raw bytes for *audio_reference* from the host."""
        try:
            blob = self.file_store.get_file_blob(audio_reference)
        except HostApiError as exc:
            raise AudioLoadFailure(audio_reference, f"Failed to load audio file: {exc}") from exc
        if blob is None:
            raise AudioLoadFailure(audio_reference)
        return blob

    def transcribe(self, audio_reference: str, options: TranscriptionOptions) -> str:
        """Transcribe the referenced audio; raises TranscriptionError on failure."""
        if not (options.api_key or "").strip():
            raise MissingCredential()

        blob = self.load_audio(audio_reference)
        audio = resolve_audio_file(audio_reference, blob)

        LOG.info(f"Transcribing {audio_reference} as {audio.filename} ({blob.size} bytes)")
        text = self.backend.transcribe(audio, options)
        LOG.info(f"Transcription finished: {len(text)} characters")
        return text
