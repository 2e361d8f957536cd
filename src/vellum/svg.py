from __future__ import annotations
import base64
import html
import io
import itertools
import logging
import math
from pathlib import Path
from typing import Literal, Self

from .base import DashedStroke, Shape, Stroke
from .color import Color, Colors
from .errors import ResourceError
from .export import Capabilities, DocumentExporter, ExportOptions, export_standalone
from .fonts import FontCache, FontRef, FontRegistry, FontWeight
from .position import (
    CurvePosition,
    EllipsePosition,
    ImagePosition,
    StylePosition,
    TextPosition,
)

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "sans-serif"

_BASELINES = {"top": "hanging", "middle": "middle", "bottom": "alphabetic"}
_OFFSETS = {"start": "0%", "middle": "50%", "end": "100%"}


def fmt(value: float) -> str:
    """Formats a coordinate with at most four decimals."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def path_data(curve: CurvePosition) -> str:
    parts = []

    for command in curve.commands():
        match command:
            case ("move", p):
                parts.append(f"M {fmt(p.x)} {fmt(p.y)}")
            case ("line", p):
                parts.append(f"L {fmt(p.x)} {fmt(p.y)}")
            case ("cubic", c1, c2, p):
                parts.append(
                    f"C {fmt(c1.x)} {fmt(c1.y)}, {fmt(c2.x)} {fmt(c2.y)}, {fmt(p.x)} {fmt(p.y)}"
                )

    if curve.closed:
        parts.append("Z")

    return " ".join(parts)


class SvgExporter(DocumentExporter):
    """
    Writes shapes as an SVG document.

    The default draw state paints nothing: no fill and no stroke.
    `start_style` overrides it and `end_style` restores it. Fonts from the
    registry are embedded as base64 @font-face rules, once per (font, weight)
    and document. `font_cache` starts as a copy of the table passed in and ends
    up holding every face this document uses.
    """

    capabilities = Capabilities(ellipse=True)

    def __init__(
        self,
        width: float = 1000,
        height: float = 1000,
        viewbox: tuple[float, float, float, float] | None = None,
        fonts: FontRegistry | None = None,
        font_cache: FontCache | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.viewbox = viewbox or (0, 0, width, height)
        self.fonts = fonts
        self.font_cache: FontCache = dict(font_cache or {})

        self.fill: Color | None = None
        self.stroke: Stroke | None = None

        self._elements: list[str] = []
        self._defs: list[str] = []
        self._font_faces: list[str] = []
        self._ids = itertools.count(1)

    @classmethod
    def create(cls, width: float, height: float, options: ExportOptions) -> Self:
        return cls(width, height, fonts=options.fonts, font_cache=options.font_cache)

    def start_style(self, style: StylePosition) -> None:
        if style.fill is not None:
            self.fill = style.fill
        if style.stroke is not None:
            self.stroke = style.stroke

    def end_style(self) -> None:
        self.fill = None
        self.stroke = None

    def export_curve(self, curve: CurvePosition) -> None:
        self._elements.append(f'<path d="{path_data(curve)}" {self._paint()} />')

    def export_ellipse(self, ellipse: EllipsePosition) -> None:
        cx, cy = fmt(ellipse.center.x), fmt(ellipse.center.y)
        rotation = self._rotate(ellipse.rotation, cx, cy)
        self._elements.append(
            f'<ellipse cx="{cx}" cy="{cy}" rx="{fmt(ellipse.rx)}" ry="{fmt(ellipse.ry)}"'
            f"{rotation} {self._paint()} />"
        )

    def export_text(self, text: TextPosition) -> None:
        family = html.escape(self._font_family(text.font, text.font_weight))
        fill = self.fill or Colors.Black

        attrs = (
            f'font-family="{family}" font-size="{fmt(text.font_size)}" '
            f'text-anchor="{text.anchor}" dominant-baseline="{_BASELINES[text.baseline]}" '
            f'fill="{fill}"'
        )
        if text.font_weight in ("bold", "bold_italic"):
            attrs += ' font-weight="bold"'
        if text.font_weight in ("italic", "bold_italic"):
            attrs += ' font-style="italic"'

        content = html.escape(text.text)

        if text.on_curve is not None:
            curve_id = f"curve-{next(self._ids)}"
            self._defs.append(f'<path id="{curve_id}" d="{path_data(text.on_curve)}" />')
            self._elements.append(
                f'<text {attrs}><textPath href="#{curve_id}" '
                f'startOffset="{_OFFSETS[text.anchor]}">{content}</textPath></text>'
            )
            return

        x, y = fmt(text.reference_start.x), fmt(text.reference_start.y)
        rotation = self._rotate(text.rotation, x, y)
        self._elements.append(f'<text x="{x}" y="{y}" {attrs}{rotation}>{content}</text>')

    def export_image(self, image: ImagePosition) -> None:
        if not image.image.data:
            raise ResourceError("Image has no pixel data")

        try:
            picture = image.image.to_pil()
        except ValueError as exc:
            raise ResourceError(f"Image pixel data is unreadable: {exc}") from exc

        buffer = io.BytesIO()
        picture.save(buffer, format="PNG")
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")

        cx, cy = fmt(image.center.x), fmt(image.center.y)
        x = fmt(image.center.x - image.width / 2)
        y = fmt(image.center.y - image.height / 2)
        rotation = self._rotate(image.rotation, cx, cy)

        self._elements.append(
            f'<image x="{x}" y="{y}" width="{fmt(image.width)}" height="{fmt(image.height)}" '
            f'preserveAspectRatio="none" href="data:image/png;base64,{encoded}"{rotation} />'
        )

    def finish(self) -> str:
        defs = list(self._defs)

        if self._font_faces:
            defs.insert(0, "<style>\n" + "\n".join(self._font_faces) + "\n</style>")

        defs_content = "\n    ".join(defs)
        content = "\n  ".join(self._elements)

        vx, vy, vw, vh = self.viewbox
        return (
            f'<svg width="{fmt(self.width)}" height="{fmt(self.height)}" '
            f'viewBox="{fmt(vx)} {fmt(vy)} {fmt(vw)} {fmt(vh)}" '
            'xmlns="http://www.w3.org/2000/svg">\n'
            f"  <defs>\n    {defs_content}\n  </defs>\n"
            f"  {content}\n"
            "</svg>"
        )

    def _paint(self) -> str:
        fill = "none" if self.fill is None else str(self.fill)

        if self.stroke is None:
            return f'fill="{fill}" stroke="none"'

        attrs = (
            f'fill="{fill}" stroke="{self.stroke.color}" '
            f'stroke-width="{fmt(self.stroke.width)}"'
        )

        if isinstance(self.stroke, DashedStroke):
            attrs += f' stroke-dasharray="{fmt(self.stroke.on)} {fmt(self.stroke.off)}"'

        return attrs

    def _rotate(self, theta: float, cx: str, cy: str) -> str:
        degrees = fmt(math.degrees(theta))

        if degrees == "0":
            return ""

        return f' transform="rotate({degrees} {cx} {cy})"'

    def _font_family(self, font: FontRef | None, weight: FontWeight) -> str:
        if font is None:
            return DEFAULT_FONT_FAMILY

        key = (font, weight)

        if key in self.font_cache:
            return self.font_cache[key]

        group = self.fonts.get(font) if self.fonts is not None else None

        if group is None:
            # Not registered: the viewer is expected to have it installed
            return font.name

        face = group.get(weight)

        if not face.data:
            raise ResourceError(f"Font {font.name!r} ({weight}) has no data")

        family = f"{font.name}-{weight}"
        encoded = base64.b64encode(face.data).decode("ascii")
        self._font_faces.append(
            f"@font-face {{ font-family: '{family}'; "
            f"src: url(data:{face.mime};base64,{encoded}); }}"
        )
        self.font_cache[key] = family

        logger.debug("Embedded font %s (%s) as %r", font.name, weight, family)
        return family


def to_svg(shape: Shape, options: ExportOptions | None = None) -> str:
    return export_standalone(shape, SvgExporter, options)


def convert(
    svg: str,
    kind: Literal["png", "pdf", "ps"],
    write_to: str | Path | None = None,
    dpi: int = 96,
) -> bytes | None:
    """
    Converts an SVG document with cairosvg.
    Returns the bytes, or None when `write_to` is given.
    Requires the 'export' extra (cairosvg).
    """
    try:
        import cairosvg
    except ImportError:
        raise ImportError(
            "Export requires 'cairosvg'. Install with: pip install vellum[export]"
        )

    data = svg.encode("utf-8")
    target = None if write_to is None else str(write_to)

    match kind:
        case "png":
            return cairosvg.svg2png(bytestring=data, write_to=target, dpi=dpi)
        case "pdf":
            return cairosvg.svg2pdf(bytestring=data, write_to=target, dpi=dpi)
        case "ps":
            return cairosvg.svg2ps(bytestring=data, write_to=target, dpi=dpi)
        case _:
            raise ValueError(f"Unsupported export format: {kind}")
