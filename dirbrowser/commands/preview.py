"""Preview classification and code-preview highlighting.

Classification is a fixed extension table. Code previews are highlighted
with Pygments, falling back to the plain-text lexer for unknown names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound


class PreviewClass(str, Enum):
    CODE = "code"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    UNKNOWN = "unknown"


PREVIEW_EXTENSIONS: dict[PreviewClass, tuple[str, ...]] = {
    PreviewClass.CODE: ("txt", "ini", "xml", "cpp", "h", "pro", "js", "html", "css", "csv", "json", "go"),
    PreviewClass.IMAGE: ("png", "jpg", "jpeg", "bmp", "gif"),
    PreviewClass.AUDIO: ("mp3", "wav"),
    PreviewClass.VIDEO: ("mp4", "flv"),
}


def preview_class(name: str) -> PreviewClass:
    """Classify ``name`` by its last extension, case-insensitively."""
    parts = name.split(".")
    if len(parts) < 2:
        return PreviewClass.UNKNOWN
    ext = parts[-1].lower()
    for kind, extensions in PREVIEW_EXTENSIONS.items():
        if ext in extensions:
            return kind
    return PreviewClass.UNKNOWN


@dataclass(frozen=True)
class Preview:
    """What the host should show for a preview request.

    ``text`` is filled only for code previews; media previews carry the
    file URL for the host's player/image surface.
    """

    key: str
    kind: PreviewClass
    url: str
    text: str | None = None

    @property
    def previewable(self) -> bool:
        return self.kind is not PreviewClass.UNKNOWN

    @property
    def name(self) -> str:
        return self.key.rsplit("/", 1)[-1]

    def highlighted(self) -> str:
        """Highlighted code text; empty for media and unknown previews."""
        if self.text is None:
            return ""
        return highlight_code(self.name, self.text)


def highlight_code(name: str, source: str) -> str:
    """Return ANSI-highlighted ``source`` using a lexer picked from ``name``."""
    try:
        lexer = get_lexer_for_filename(name, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    return highlight(source, lexer, TerminalFormatter())


__all__ = [
    "PreviewClass",
    "PREVIEW_EXTENSIONS",
    "preview_class",
    "Preview",
    "highlight_code",
]
