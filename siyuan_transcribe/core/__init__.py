"""Core host-agnostic transcription logic."""

from siyuan_transcribe.core.audio import (
    ALLOWED_EXTENSIONS,
    AudioBlob,
    ResolvedFile,
    ensure_filename,
    guess_ext_from_mime,
    resolve_audio_file,
)
from siyuan_transcribe.core.config import (
    CONFIG_DIR,
    CONFIG_FILE,
    DEFAULT_CONFIG,
    LANGUAGES,
    load_config,
    normalize_config,
    resolve_api_key,
    save_config,
)
from siyuan_transcribe.core.element import AudioBlockElement
from siyuan_transcribe.core.errors import (
    AudioLoadFailure,
    AudioNotFound,
    HostApiError,
    MissingCredential,
    TranscriptionApiError,
    TranscriptionError,
    UnsupportedFormat,
)
from siyuan_transcribe.core.locator import AudioLocator, locate
from siyuan_transcribe.core.state import MESSAGES, WorkflowState

__all__ = [
    "ALLOWED_EXTENSIONS",
    "AudioBlob",
    "ResolvedFile",
    "ensure_filename",
    "guess_ext_from_mime",
    "resolve_audio_file",
    "CONFIG_DIR",
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "LANGUAGES",
    "load_config",
    "normalize_config",
    "resolve_api_key",
    "save_config",
    "AudioBlockElement",
    "AudioLoadFailure",
    "AudioNotFound",
    "HostApiError",
    "MissingCredential",
    "TranscriptionApiError",
    "TranscriptionError",
    "UnsupportedFormat",
    "AudioLocator",
    "locate",
    "MESSAGES",
    "WorkflowState",
]
