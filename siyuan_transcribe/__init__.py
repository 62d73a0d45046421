"""Transcribe SiYuan audio blocks with an OpenAI-compatible speech-to-text API."""

__version__ = "0.1.0"
