"""Block DOM fragments reduced to the parts the audio locator inspects."""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser

_SKIP_TEXT_TAGS = {"script", "style"}
_VOID_TAGS = {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}


@dataclass
class AudioBlockElement:
    """A rendered block: root attributes, media sources and visible text."""

    attributes: dict[str, str] = field(default_factory=dict)
    audio_sources: list[str] = field(default_factory=list)
    has_audio: bool = False
    has_video: bool = False
    text: str = ""

    @property
    def node_id(self) -> str | None:
        return self.attributes.get("data-node-id") or None

    @property
    def block_type(self) -> str | None:
        return self.attributes.get("data-type") or None

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    @property
    def audio_src(self) -> str | None:
        """First non-empty source of the first embedded audio element."""
        return self.audio_sources[0] if self.audio_sources else None

    @classmethod
    def from_html(cls, fragment: str) -> "AudioBlockElement":
        parser = _BlockParser()
        parser.feed(fragment or "")
        parser.close()
        return cls(
            attributes=parser.root_attributes,
            audio_sources=parser.audio_sources,
            has_audio=parser.has_audio,
            has_video=parser.has_video,
            text="".join(parser.text_parts),
        )


class _BlockParser(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root_attributes: dict[str, str] = {}
        self.audio_sources: list[str] = []
        self.has_audio = False
        self.has_video = False
        self.text_parts: list[str] = []
        self._seen_root = False
        self._audio_depth = 0
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        values = {name: value or "" for name, value in attrs}
        if not self._seen_root:
            self._seen_root = True
            self.root_attributes = values

        if tag == "audio":
            self.has_audio = True
            if values.get("src"):
                self.audio_sources.append(values["src"])
            self._audio_depth += 1
        elif tag == "source" and self._audio_depth and values.get("src"):
            self.audio_sources.append(values["src"])
        elif tag == "video":
            self.has_video = True
        elif tag in _SKIP_TEXT_TAGS:
            self._skip_depth += 1

    def handle_startendtag(self, tag, attrs):
        self.handle_starttag(tag, attrs)
        if tag not in _VOID_TAGS:
            self.handle_endtag(tag)

    def handle_endtag(self, tag):
        if tag == "audio" and self._audio_depth:
            self._audio_depth -= 1
        elif tag in _SKIP_TEXT_TAGS and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data):
        if not self._skip_depth:
            self.text_parts.append(data)
