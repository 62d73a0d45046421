"""Error types raised by the transcription pipeline and host adapters."""

from __future__ import annotations


class TranscriptionError(Exception):
    """Base class for failures that end a transcription request."""


class MissingCredential(TranscriptionError):
    """No API key was configured."""

    def __init__(self, message="OpenAI API key is required"):
        super().__init__(message)


class AudioNotFound(TranscriptionError):
    """The audio block did not yield a usable audio reference."""

    def __init__(self, message="Audio file not found in block"):
        super().__init__(message)


class AudioLoadFailure(TranscriptionError):
    """The host could not return bytes for the audio reference."""

    def __init__(self, reference: str, message: str | None = None):
        self.reference = reference
        super().__init__(message or "Failed to load audio file")


class UnsupportedFormat(TranscriptionError):
    """The resolved file extension is not accepted by the endpoint."""

    def __init__(self, extension: str, allowed):
        self.extension = extension
        self.allowed = tuple(allowed)
        super().__init__(f'Unsupported audio format ".{extension}". Supported: {", ".join(self.allowed)}')


class TranscriptionApiError(TranscriptionError):
    """The transcription service rejected the request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class HostApiError(Exception):
    """A SiYuan kernel API call failed."""

    def __init__(self, endpoint: str, message: str, code: int | None = None):
        self.endpoint = endpoint
        self.code = code
        super().__init__(f"{endpoint}: {message}")
