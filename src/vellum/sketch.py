from __future__ import annotations
import random
from typing import Self

from .core import Point
from .export import Capabilities, ExportOptions
from .fonts import FontCache, FontRegistry
from .position import CurvePosition
from .svg import SvgExporter, fmt


class SketchExporter(SvgExporter):
    """
    An SVG exporter that draws every curve in a hand-drawn, "sketchy" style.

    It has no native ellipses: they reach `export_curve` as Bezier curves and
    get the same wobbly treatment as everything else. Text and images are
    drawn as usual.
    """

    capabilities = Capabilities(ellipse=False)

    def __init__(
        self,
        width: float = 1000,
        height: float = 1000,
        viewbox: tuple[float, float, float, float] | None = None,
        fonts: FontRegistry | None = None,
        font_cache: FontCache | None = None,
        roughness: float = 1.0,
        seed: int = 42,
    ) -> None:
        super().__init__(width, height, viewbox, fonts, font_cache)
        self.roughness = roughness
        self.rng = random.Random(seed) if seed else random.Random()

    @classmethod
    def create(cls, width: float, height: float, options: ExportOptions) -> Self:
        return cls(width, height, fonts=options.fonts, font_cache=options.font_cache)

    def export_curve(self, curve: CurvePosition) -> None:
        self._elements.append(f'<path d="{self._sketchify(curve)}" {self._paint()} />')

    def _sketchify(self, curve: CurvePosition) -> str:
        """Returns path data with wobbly double-strokes for the whole curve."""
        parts: list[str] = []
        start = current = Point.zero()

        for command in curve.commands():
            match command:
                case ("move", p):
                    start = current = p
                case ("line", p):
                    self._draw_wobbly_line(parts, current, p)
                    current = p
                case ("cubic", cp1, cp2, end):
                    self._draw_wobbly_bezier(parts, current, cp1, cp2, end)
                    current = end

        # No Z: the hand-drawn mismatch at the seam is part of the look
        if curve.closed and current != start:
            self._draw_wobbly_line(parts, current, start)

        return " ".join(parts)

    def _draw_wobbly_line(self, parts: list[str], p1: Point, p2: Point) -> None:
        # Draw two lines with slight random offsets
        self._draw_curve_pass(parts, p1, p2)
        self._draw_curve_pass(parts, p1, p2)

    def _draw_curve_pass(self, parts: list[str], p1: Point, p2: Point) -> None:
        """
        Draws a single pass of a line, but curves it slightly using a cubic bezier.
        """
        dist = p1.distance(p2)

        if dist < 0.1:
            return

        r = self.roughness * 0.5

        # Control points shifted perpendicular to the line
        perp = Point(-(p2.y - p1.y), p2.x - p1.x).normalize()
        dev1 = perp * self.rng.uniform(-r, r) * (dist * 0.1)
        dev2 = perp * self.rng.uniform(-r, r) * (dist * 0.1)

        # Add some overshoot/undershoot to endpoints
        overshoot = (p2 - p1).normalize() * self.rng.uniform(-r * 2, r * 2)

        start_pt = p1 - overshoot * 0.2
        end_pt = p2 + overshoot * 0.2

        cp1 = start_pt + (p2 - p1) * 0.3 + dev1
        cp2 = start_pt + (p2 - p1) * 0.7 + dev2

        parts.append(_move(start_pt))
        parts.append(_cubic(cp1, cp2, end_pt))

    def _draw_wobbly_bezier(
        self, parts: list[str], start: Point, cp1: Point, cp2: Point, end: Point
    ) -> None:
        # Perturbing the control points is enough; a full rough implementation
        # would estimate the curve length and subdivide
        r = self.roughness * 5

        def perturb(p: Point) -> Point:
            return Point(p.x + self.rng.uniform(-r, r), p.y + self.rng.uniform(-r, r))

        for _ in range(2):
            parts.append(_move(start))
            parts.append(_cubic(perturb(cp1), perturb(cp2), perturb(end)))


def _move(p: Point) -> str:
    return f"M {fmt(p.x)} {fmt(p.y)}"


def _cubic(cp1: Point, cp2: Point, end: Point) -> str:
    return f"C {fmt(cp1.x)} {fmt(cp1.y)}, {fmt(cp2.x)} {fmt(cp2.y)}, {fmt(end.x)} {fmt(end.y)}"
