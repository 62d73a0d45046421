"""Recover an audio reference from a rendered audio block."""

from __future__ import annotations

import logging
import re
from typing import Callable
from urllib.parse import urlsplit

from siyuan_transcribe.core.element import AudioBlockElement
from siyuan_transcribe.core.errors import AudioNotFound, HostApiError

LOG = logging.getLogger("siyuan_transcribe")

MARKDOWN_LINK_RE = re.compile(r"!\[.*?\]\((.*?)\)")
HTML_SRC_RE = re.compile(r"""<audio\b[^>]*?\bsrc=["']([^"']+)["']""", re.IGNORECASE)

ASSET_PREFIX = "assets/"
DATA_ATTRIBUTES = ("data-src", "data-url")


class InlineAudioRejected(AudioNotFound):
    """The block embeds its audio as a data: URL."""

    def __init__(self):
        super().__init__("Inline data URLs are not supported for transcription")


Resolver = Callable[[AudioBlockElement], "str | None"]


def is_data_url(value: str) -> bool:
    return value.lstrip().lower().startswith("data:")


def normalize_asset_path(value: str) -> str:
    """Give asset-relative paths the leading slash the kernel serves them under."""
    if value.startswith(ASSET_PREFIX):
        return "/" + value
    return value


def extract_markdown_target(text: str | None) -> str | None:
    """Return the normalized target of the first ``![label](target)`` in *text*."""
    if not text:
        return None
    match = MARKDOWN_LINK_RE.search(text)
    if match and match.group(1):
        return normalize_asset_path(match.group(1))
    return None


def extract_kramdown_target(kramdown: str | None) -> str | None:
    """Markdown link first, then the ``<audio src=...>`` form SiYuan stores."""
    target = extract_markdown_target(kramdown)
    if target:
        return target
    match = HTML_SRC_RE.search(kramdown or "")
    if match:
        return normalize_asset_path(match.group(1))
    return None


def resolve_media_source(element: AudioBlockElement) -> str | None:
    src = element.audio_src
    if not src:
        return None
    if is_data_url(src):
        raise InlineAudioRejected()

    parts = urlsplit(src)
    if parts.scheme:
        return parts.path

    if src.startswith("/"):
        return src
    if src.startswith(ASSET_PREFIX):
        return "/" + src
    return None


def resolve_data_attribute(element: AudioBlockElement) -> str | None:
    for name in DATA_ATTRIBUTES:
        value = element.get_attribute(name)
        if value:
            return normalize_asset_path(value)
    return None


def resolve_markdown_text(element: AudioBlockElement) -> str | None:
    return extract_markdown_target(element.text)


DEFAULT_RESOLVERS: list[Resolver] = [
    resolve_media_source,
    resolve_data_attribute,
    resolve_markdown_text,
]


def locate(element: AudioBlockElement, resolvers: list[Resolver] | None = None) -> str | None:
    """Return the first reference produced by *resolvers*, or None."""
    for resolver in (resolvers if resolvers is not None else DEFAULT_RESOLVERS):
        try:
            reference = resolver(element)
        except AudioNotFound as exc:
            LOG.info(f"Audio lookup stopped by {resolver.__name__}: {exc}")
            return None
        if not reference:
            continue
        if is_data_url(reference):
            LOG.info(f"Ignoring inline data URL from {resolver.__name__}")
            return None
        LOG.debug(f"Audio reference {reference} found by {resolver.__name__}")
        return reference
    return None


def kramdown_resolver(block_store) -> Resolver:
    """Build a resolver that reads the block's raw markdown from *block_store*."""

    def resolve_block_kramdown(element: AudioBlockElement) -> str | None:
        block_id = element.node_id
        if not block_id:
            return None
        try:
            kramdown = block_store.get_block_kramdown(block_id)
        except HostApiError as exc:
            LOG.warning(f"Failed to fetch kramdown for block {block_id}: {exc}")
            return None
        return extract_kramdown_target(kramdown)

    return resolve_block_kramdown


class AudioLocator:
    """Runs the element resolvers, then falls back to the stored block markdown."""

    def __init__(self, block_store=None, resolvers: list[Resolver] | None = None):
        self.resolvers = list(resolvers if resolvers is not None else DEFAULT_RESOLVERS)
        if block_store is not None:
            self.resolvers.append(kramdown_resolver(block_store))

    def locate(self, element: AudioBlockElement) -> str | None:
        return locate(element, self.resolvers)

    def require(self, element: AudioBlockElement) -> str:
        """Like locate(), but raise AudioNotFound instead of returning None."""
        reference = self.locate(element)
        if reference is None:
            raise AudioNotFound()
        return reference
