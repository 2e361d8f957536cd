"""
Font resources consumed by text export.

Loading font files is the caller's business; this module only describes
what a backend receives. Fonts travel with the export options, never through
module-level state, so concurrent exports do not share a cache.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, TypeAlias


FontWeight: TypeAlias = Literal["regular", "bold", "italic", "bold_italic"]


@dataclass(frozen=True)
class FontRef:
    """Names a font family; resolved against a FontRegistry at export time."""

    name: str = "sans-serif"


@dataclass(frozen=True)
class Font:
    data: bytes
    format: Literal["ttf", "otf"] = "ttf"

    @property
    def mime(self) -> str:
        return f"font/{self.format}"

    @classmethod
    def open(cls, path: str | Path) -> Font:
        path = Path(path)
        fmt = "otf" if path.suffix.lower() == ".otf" else "ttf"
        return cls(path.read_bytes(), fmt)


@dataclass
class FontGroup:
    """The faces of one family. Missing faces fall back to the regular one."""

    regular: Font
    bold: Font | None = None
    italic: Font | None = None
    bold_italic: Font | None = None

    def get(self, weight: FontWeight) -> Font:
        match weight:
            case "bold":
                face = self.bold
            case "italic":
                face = self.italic
            case "bold_italic":
                face = self.bold_italic
            case _:
                face = None

        return face or self.regular


class FontRegistry:
    def __init__(self, fonts: dict[str, FontGroup] | None = None) -> None:
        self._fonts: dict[str, FontGroup] = dict(fonts or {})

    def register(self, ref: FontRef | str, group: FontGroup) -> FontRef:
        name = ref.name if isinstance(ref, FontRef) else ref
        self._fonts[name] = group
        return FontRef(name)

    def get(self, ref: FontRef) -> FontGroup | None:
        return self._fonts.get(ref.name)

    def __contains__(self, ref: FontRef) -> bool:
        return ref.name in self._fonts

    def __len__(self) -> int:
        return len(self._fonts)


# Maps (font, weight) to whatever handle the backend uses once the face is
# in its document, e.g. a CSS family name for SVG.
FontCache: TypeAlias = dict[tuple[FontRef, FontWeight], str]
