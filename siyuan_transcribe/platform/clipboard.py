"""Clipboard output adapter."""

from __future__ import annotations

import logging

import pyperclip

LOG = logging.getLogger("siyuan_transcribe")


class PyperclipOutput:
    """Copies transcriptions that could not be placed in the document."""

    def copy_only(self, text):
        """Just copy text to clipboard."""
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            LOG.debug(f"Failed to copy transcription to clipboard: {exc}")
            return False
        return True
