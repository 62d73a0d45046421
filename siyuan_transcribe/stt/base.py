"""Transcription backend protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from siyuan_transcribe.core.audio import ResolvedFile
    from siyuan_transcribe.core.transcription import TranscriptionOptions


class TranscriptionBackend(Protocol):
    """Remote speech-to-text service."""

    def transcribe(self, audio: ResolvedFile, options: TranscriptionOptions) -> str:
        """Upload a named audio payload and return the transcribed text."""
