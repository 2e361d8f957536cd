"""Print-document output: PDF and PostScript rendered from the SVG backend."""

from __future__ import annotations
from pathlib import Path

from .base import Shape
from .export import ExportOptions
from .svg import convert, to_svg


def to_pdf(shape: Shape, options: ExportOptions | None = None, dpi: int = 96) -> bytes:
    """
    Renders `shape` as a one-page PDF sized like the SVG document would be.
    Requires the 'export' extra (cairosvg).
    """
    return convert(to_svg(shape, options), "pdf", dpi=dpi)


def save_pdf(
    shape: Shape,
    path: str | Path,
    options: ExportOptions | None = None,
    dpi: int = 96,
) -> None:
    kind = "ps" if Path(path).suffix.lower() == ".ps" else "pdf"
    convert(to_svg(shape, options), kind, write_to=path, dpi=dpi)
