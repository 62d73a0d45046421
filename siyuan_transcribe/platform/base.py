"""Host adapter interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from siyuan_transcribe.core.audio import AudioBlob

SEVERITY_INFO = "info"
SEVERITY_ERROR = "error"


@dataclass
class BlockInfo:
    """Block metadata needed to place new content next to a block."""

    id: str
    parent_id: str = ""
    root_id: str = ""

    @property
    def insertion_parent(self) -> str:
        return self.parent_id or self.root_id


class FileStore(Protocol):
    """Resolves audio references to bytes."""

    def get_file_blob(self, path: str) -> AudioBlob | None:
        """Return the file at *path*, or None if it cannot be read."""


class BlockStore(Protocol):
    """Read/write access to the host document model."""

    def get_block_kramdown(self, block_id: str) -> str:
        """Return the raw markdown source of a block."""

    def get_block_by_id(self, block_id: str) -> BlockInfo | None:
        """Return block metadata, or None for an unknown id."""

    def insert_block(
        self,
        data_type: str,
        data: str,
        next_id: str | None = None,
        previous_id: str | None = None,
        parent_id: str | None = None,
    ) -> None:
        """Insert new content relative to existing blocks."""


class Notifier(Protocol):
    """User-visible messages."""

    def notify(self, message: str, severity: str = SEVERITY_INFO) -> None:
        """Display *message* with the given severity."""


class ClipboardOutput(Protocol):
    """Clipboard sink for text that could not be inserted."""

    def copy_only(self, text: str) -> bool:
        """Copy text to clipboard only."""
