"""Audio payload naming and format validation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from siyuan_transcribe.core.errors import UnsupportedFormat

LOG = logging.getLogger("siyuan_transcribe")

# Extensions accepted by the /audio/transcriptions endpoint
ALLOWED_EXTENSIONS = frozenset(
    {"flac", "m4a", "mp3", "mp4", "mpeg", "mpga", "oga", "ogg", "wav", "webm"}
)

DEFAULT_BASENAME = "audio"
DEFAULT_EXTENSION = "wav"

_EXTENSION_RE = re.compile(r"\.[a-z0-9]{1,5}$", re.IGNORECASE)


def _contains(*needles):
    return lambda mime: any(needle in mime for needle in needles)


# Order matters: "audio/mp4" must resolve to mp4 before the m4a check sees it.
MIME_EXTENSIONS = [
    (_contains("wav"), "wav"),
    (_contains("webm"), "webm"),
    (_contains("ogg", "oga"), "ogg"),
    (_contains("mp4"), "mp4"),
    (_contains("mpeg"), "mp3"),
    (_contains("mp3"), "mp3"),
    (_contains("flac"), "flac"),
    (_contains("m4a", "mp4a"), "m4a"),
]


@dataclass
class AudioBlob:
    """Raw bytes returned by the host for an audio reference."""

    data: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class ResolvedFile:
    """Audio bytes with the filename that will be uploaded."""

    data: bytes
    filename: str
    content_type: str = ""

    @property
    def extension(self) -> str:
        return extension_of(self.filename)


def guess_ext_from_mime(mime: str | None) -> str | None:
    """Map a content type to a file extension, or None if unrecognized."""
    if not mime:
        return None
    lowered = mime.lower()
    for matches, extension in MIME_EXTENSIONS:
        if matches(lowered):
            return extension
    return None


def get_basename(path: str) -> str:
    """Return the last path segment with query and fragment removed."""
    clean = path.split("?", 1)[0].split("#", 1)[0]
    return clean.split("/")[-1] or DEFAULT_BASENAME


def ensure_filename(path: str, content_type: str | None) -> str:
    """Return a filename for *path* that always carries an extension."""
    base = get_basename(path)
    if _EXTENSION_RE.search(base):
        return base
    extension = guess_ext_from_mime(content_type) or DEFAULT_EXTENSION
    return f"{base}.{extension}"


def extension_of(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def validate_extension(filename: str) -> str:
    """Return the lowercase extension of *filename* or raise UnsupportedFormat."""
    extension = extension_of(filename)
    if extension not in ALLOWED_EXTENSIONS:
        raise UnsupportedFormat(extension, sorted(ALLOWED_EXTENSIONS))
    return extension


def resolve_audio_file(reference: str, blob: AudioBlob) -> ResolvedFile:
    """Name and validate the payload fetched for *reference*."""
    filename = ensure_filename(reference, blob.content_type)
    validate_extension(filename)
    LOG.debug(f"Resolved audio {reference} -> filename={filename} content_type={blob.content_type!r} size={blob.size}")
    return ResolvedFile(data=blob.data, filename=filename, content_type=blob.content_type or "")
