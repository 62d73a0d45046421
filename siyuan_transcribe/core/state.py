"""Workflow outcome states and their user-facing messages."""

from enum import Enum


class WorkflowState(str, Enum):
    """Final state of one transcribe-block run."""

    NOT_CONFIGURED = "not_configured"
    NO_AUDIO = "no_audio"
    INSERTED = "inserted"
    SHOWN = "shown"
    FAILED = "failed"


MESSAGES = {
    "select_audio_block": "Select an audio block to transcribe.",
    "api_key_required": "Please configure your OpenAI API key in settings first.",
    "audio_not_found": "Audio file not found in this block.",
    "transcribing": "Transcribing audio...",
    "transcription_success": "Transcription inserted.",
    "transcription_error": "Transcription failed",
}

SUCCESS_STATES = {WorkflowState.INSERTED, WorkflowState.SHOWN}
