"""Transcribe-block workflow: locate, transcribe, insert or show."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from siyuan_transcribe.core.errors import AudioNotFound, HostApiError, TranscriptionError
from siyuan_transcribe.core.locator import AudioLocator
from siyuan_transcribe.core.state import MESSAGES, WorkflowState
from siyuan_transcribe.core.transcription import TranscriptionEngine, TranscriptionOptions
from siyuan_transcribe.platform.base import (
    SEVERITY_ERROR,
    SEVERITY_INFO,
    BlockStore,
    ClipboardOutput,
    FileStore,
    Notifier,
)

LOG = logging.getLogger("siyuan_transcribe")

MEDIA_BLOCK_TYPES = {"av", "audio", "video"}


@dataclass
class WorkflowResult:
    state: WorkflowState
    text: str | None = None
    message: str = ""


class TranscribeBlockWorkflow:
    """Runs one transcription for the audio block among the selected blocks."""

    def __init__(
        self,
        config,
        block_store: BlockStore,
        file_store: FileStore,
        notifier: Notifier,
        clipboard: ClipboardOutput | None = None,
        engine: TranscriptionEngine | None = None,
        locator: AudioLocator | None = None,
    ):
        self.config = config
        self.block_store = block_store
        self.notifier = notifier
        self.clipboard = clipboard
        self.engine = engine or TranscriptionEngine(file_store)
        self.locator = locator or AudioLocator(block_store=block_store)

    @staticmethod
    def has_transcribable_media(elements) -> bool:
        """Whether the selection holds audio, video or an attribute-view block."""
        return any(
            element.has_audio or element.has_video or element.block_type in MEDIA_BLOCK_TYPES
            for element in elements
        )

    @staticmethod
    def has_audio(elements) -> bool:
        return any(element.has_audio for element in elements)

    @staticmethod
    def find_audio_element(elements):
        return next((element for element in elements if element.has_audio), None)

    def _fail(self, state, message):
        self.notifier.notify(message, SEVERITY_ERROR)
        return WorkflowResult(state=state, message=message)

    def run_from_block_icon(self, elements) -> WorkflowResult:
        """Block-icon menu entry: only actionable when an audio block is selected."""
        if not self.has_audio(elements):
            message = MESSAGES["select_audio_block"]
            self.notifier.notify(message, SEVERITY_INFO)
            return WorkflowResult(state=WorkflowState.NO_AUDIO, message=message)
        return self.run(elements)

    def run(self, elements) -> WorkflowResult:
        options = TranscriptionOptions.from_config(self.config)
        if not options.api_key:
            return self._fail(WorkflowState.NOT_CONFIGURED, MESSAGES["api_key_required"])

        element = self.find_audio_element(elements)
        if element is None:
            return self._fail(WorkflowState.NO_AUDIO, MESSAGES["audio_not_found"])

        try:
            audio_reference = self.locator.require(element)
        except AudioNotFound:
            return self._fail(WorkflowState.NO_AUDIO, MESSAGES["audio_not_found"])

        self.notifier.notify(MESSAGES["transcribing"], SEVERITY_INFO)
        try:
            text = self.engine.transcribe(audio_reference, options)
        except TranscriptionError as exc:
            LOG.error(f"Transcription of {audio_reference} failed: {exc}")
            return self._fail(WorkflowState.FAILED, f"{MESSAGES['transcription_error']}: {exc}")

        return self._deliver(element.node_id, text)

    def _deliver(self, block_id, text) -> WorkflowResult:
        """Insert *text* after the audio block, or show it when that is impossible."""
        if block_id:
            try:
                block = self.block_store.get_block_by_id(block_id)
                if block is None:
                    raise HostApiError("/api/query/sql", f"block {block_id} not found")
                self.block_store.insert_block("markdown", text, None, block_id, block.insertion_parent)
            except HostApiError as exc:
                LOG.warning(f"Could not insert transcription after {block_id}: {exc}")
            else:
                message = MESSAGES["transcription_success"]
                self.notifier.notify(message, SEVERITY_INFO)
                return WorkflowResult(state=WorkflowState.INSERTED, text=text, message=message)

        if self.clipboard is not None and self.config.get("copy_on_fallback"):
            self.clipboard.copy_only(text)
        self.notifier.notify(text, SEVERITY_INFO)
        return WorkflowResult(state=WorkflowState.SHOWN, text=text, message=text)
