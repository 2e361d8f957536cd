from __future__ import annotations
from pathlib import Path

from .base import Group
from .core import Bounds
from .export import export
from .fonts import FontRegistry
from .position import bounding_box
from .svg import SvgExporter, convert


class Canvas(Group):
    """
    A root group drawn onto a fixed-size SVG page.

    Shapes keep their own coordinates; the viewBox decides which part of the
    plane the page shows.
    """

    def __init__(
        self,
        width: float = 1000,
        height: float = 1000,
        fonts: FontRegistry | None = None,
    ) -> None:
        super().__init__()

        self.width = width
        self.height = height
        self.fonts = fonts
        # Default viewbox is the full canvas size
        self._viewbox: tuple[float, float, float, float] = (0, 0, width, height)

    def _repr_svg_(self) -> str:
        """Enables automatic rendering in Jupyter/Quarto environments."""
        return self._build_svg()

    def display(self) -> None:
        """
        Explicitly renders the SVG in supported interactive environments.
        Requires the 'notebook' extra (IPython).
        """
        try:
            from IPython.display import SVG, display as ipy_display
        except ImportError:
            raise ImportError(
                "IPython is required to display a canvas. Install with: pip install vellum[notebook]"
            )

        ipy_display(SVG(self._build_svg()))

    def fit(self, padding: float = 0, crop: bool = True, bounds: Bounds | None = None) -> Canvas:
        """
        Reduces the viewBox to perfectly fit all added shapes, or the given bounds.
        If crop is True (default), the width and height will also be adjusted.
        """
        if bounds is None:
            if not self.shapes:
                return self
            bounds = bounding_box(self)

        tight_bounds = bounds.padded(padding)

        self._viewbox = (
            tight_bounds.x,
            tight_bounds.y,
            tight_bounds.width,
            tight_bounds.height,
        )

        if crop:
            self.width = tight_bounds.width
            self.height = tight_bounds.height

        return self

    def _build_svg(self) -> str:
        exporter = SvgExporter(
            self.width, self.height, viewbox=self._viewbox, fonts=self.fonts
        )
        export(self, exporter)
        return exporter.finish()

    def save(self, path: str | Path, dpi: int = 300) -> None:
        """
        Exports the canvas to a raster or vector format with a transparent background.

        Supported formats: .png, .pdf, .svg, .ps.
        Requires the 'export' extra (cairosvg) for everything but .svg.
        """
        extension = Path(path).suffix.lower()

        if extension not in (".svg", ".png", ".pdf", ".ps"):
            raise ValueError(f"Unsupported export format: {extension}")

        svg = self._build_svg()

        if extension == ".svg":
            with open(path, "w", encoding="utf-8") as fp:
                fp.write(svg)

            return

        convert(svg, extension[1:], write_to=path, dpi=dpi)

    def __str__(self) -> str:
        return self._build_svg()
