"""
Resolution of shapes into absolute, backend-agnostic positions.

Nothing here is cached: every call composes the transforms from the root
down, so the result always reflects the current state of the tree. All
traversal state lives in local variables, which makes concurrent exports of
one tree safe as long as nobody mutates it meanwhile.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Literal, TypeAlias

from .base import (
    Bezier,
    Curve,
    Ellipse,
    Fill,
    Group,
    Image,
    Keypoint,
    Line,
    Shape,
    Stroke,
    Style,
    Text,
    unit_circle,
)
from .core import Bounds, Point, Transform
from .errors import GeometryError
from .fonts import FontRef, FontWeight


@dataclass(frozen=True)
class BezierPosition:
    start_control: Point
    end_control: Point
    end: Point
    start: Point | None = None


KeypointPosition: TypeAlias = Point | BezierPosition

PathCommand: TypeAlias = (
    tuple[Literal["move"], Point]
    | tuple[Literal["line"], Point]
    | tuple[Literal["cubic"], Point, Point, Point]
)


@dataclass(frozen=True)
class CurvePosition:
    keypoints: tuple[KeypointPosition, ...]
    closed: bool

    def hints(self) -> list[bool]:
        """
        For each keypoint, whether the next one is a Bezier that continues
        from it. Backends that join such segments smoothly need this to know
        that the keypoint's end is followed by a control point.
        """
        following = list(self.keypoints[1:]) + [None]
        return [isinstance(k, BezierPosition) and k.start is None for k in following]

    def anchors(self) -> list[Point]:
        """The on-curve points, in order."""
        result = []

        for k in self.keypoints:
            match k:
                case BezierPosition(start=None):
                    result.append(k.end)
                case BezierPosition():
                    result.extend([k.start, k.end])
                case _:
                    result.append(k)

        return result

    def segments(self) -> list[tuple[Point | None, KeypointPosition]]:
        """Pairs each keypoint with the point it starts from (None for the first point)."""
        result: list[tuple[Point | None, KeypointPosition]] = []
        pen: Point | None = None

        for k in self.keypoints:
            match k:
                case BezierPosition():
                    result.append((k.start if k.start is not None else pen, k))
                    pen = k.end
                case _:
                    result.append((pen, k))
                    pen = k

        return result

    def points(self) -> list[tuple[Point, bool]]:
        """
        Every point of the curve, controls included, each paired with a flag
        telling whether a control point comes next.
        """
        result = []

        for k, next_control in zip(self.keypoints, self.hints()):
            match k:
                case BezierPosition():
                    if k.start is not None:
                        result.append((k.start, True))
                    result.append((k.start_control, True))
                    result.append((k.end_control, False))
                    result.append((k.end, next_control))
                case _:
                    result.append((k, next_control))

        return result

    def commands(self) -> Iterator[PathCommand]:
        """Lowers the keypoints to move/line/cubic drawing commands."""
        pen: Point | None = None

        for k in self.keypoints:
            match k:
                case BezierPosition():
                    if k.start is not None:
                        if pen is None:
                            yield ("move", k.start)
                        elif k.start != pen:
                            yield ("line", k.start)
                    yield ("cubic", k.start_control, k.end_control, k.end)
                    pen = k.end
                case _:
                    yield ("move", k) if pen is None else ("line", k)
                    pen = k

    def polyline(self, steps: int = 16) -> list[Point]:
        """Flattens the curve, sampling each Bezier segment `steps` times."""
        result: list[Point] = []

        for command in self.commands():
            match command:
                case ("cubic", c1, c2, end):
                    start = result[-1]
                    for i in range(1, steps + 1):
                        result.append(cubic_point(start, c1, c2, end, i / steps))
                case (_, p):
                    result.append(p)

        if self.closed and len(result) > 1 and result[0] != result[-1]:
            result.append(result[0])

        return result

    def bounds(self) -> Bounds:
        # The control polygon encloses each Bezier segment
        return Bounds.enclosing(p for p, _ in self.points())

    @property
    def is_degenerate(self) -> bool:
        if not self.keypoints:
            return True
        return self.closed and len(self.anchors()) < 2


@dataclass(frozen=True)
class EllipsePosition:
    center: Point
    rx: float
    ry: float
    rotation: float

    def bounds(self) -> Bounds:
        cos, sin = math.cos(self.rotation), math.sin(self.rotation)
        hw = math.hypot(self.rx * cos, self.ry * sin)
        hh = math.hypot(self.rx * sin, self.ry * cos)
        return Bounds(self.center.x - hw, self.center.y - hh, 2 * hw, 2 * hh)


@dataclass(frozen=True)
class TextPosition:
    text: str
    anchor: Literal["start", "middle", "end"]
    baseline: Literal["top", "middle", "bottom"]
    font_weight: FontWeight
    font_size: float
    reference_start: Point
    direction: Point
    on_curve: CurvePosition | None
    font: FontRef | None

    @property
    def rotation(self) -> float:
        return self.direction.angle()


@dataclass(frozen=True)
class ImagePosition:
    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point
    center: Point
    width: float
    height: float
    rotation: float
    image: Image

    def bounds(self) -> Bounds:
        return Bounds.enclosing(
            [self.top_left, self.top_right, self.bottom_right, self.bottom_left]
        )


@dataclass(frozen=True)
class StylePosition:
    fill: Fill | None = None
    stroke: Stroke | None = None

    @classmethod
    def of(cls, style: Style) -> StylePosition:
        return cls(style.fill, style.stroke)

    def merged(self, outer: StylePosition | None) -> StylePosition:
        """Fills the fields this style leaves unset from an enclosing one."""
        if outer is None:
            return self

        return StylePosition(
            fill=self.fill if self.fill is not None else outer.fill,
            stroke=self.stroke if self.stroke is not None else outer.stroke,
        )

    @property
    def is_empty(self) -> bool:
        return self.fill is None and self.stroke is None


Position: TypeAlias = CurvePosition | EllipsePosition | TextPosition | ImagePosition


@dataclass(frozen=True)
class Placement:
    """A drawable shape with the transform of its parent frame and its inherited style."""

    shape: Shape
    transform: Transform
    style: StylePosition | None


def walk(
    shape: Shape,
    parent_transform: Transform | None = None,
    style: StylePosition | None = None,
) -> Iterator[Placement]:
    """Yields the drawable leaves under `shape` depth-first, in draw order."""
    if parent_transform is None:
        parent_transform = Transform.identity()

    match shape:
        case Style():
            yield from walk(shape.shape, parent_transform, StylePosition.of(shape).merged(style))
        case Group():
            transform = parent_transform @ shape.local_transform
            for child in shape.shapes:
                yield from walk(child, transform, style)
        case _:
            yield Placement(shape, parent_transform, style)


def resolve(
    shape: Shape, parent_transform: Transform | None = None
) -> Position | list[Position]:
    """
    Computes the absolute position of `shape` under `parent_transform`.

    Ellipses come back as their closed Bezier approximation; use
    `resolve_ellipse` for the native form. Groups resolve to the positions
    of their leaves, in draw order.
    """
    if parent_transform is None:
        parent_transform = Transform.identity()

    if isinstance(shape, Group):
        return [resolve(p.shape, p.transform) for p in walk(shape, parent_transform)]

    absolute = parent_transform @ shape.local_transform

    match shape:
        case Style():
            return resolve(shape.shape, parent_transform)
        case Ellipse():
            return CurvePosition(_resolve_keypoints(unit_circle(), absolute), closed=True)
        case Curve():
            return CurvePosition(_resolve_keypoints(shape.keypoints, absolute), shape.closed)
        case Line():
            return CurvePosition((absolute.map(shape.p1), absolute.map(shape.p2)), closed=False)
        case Text():
            return _resolve_text(shape, absolute)
        case Image():
            return _resolve_image(shape, absolute)
        case _:
            raise TypeError(f"Cannot resolve shape of type {type(shape).__name__}")


def resolve_ellipse(ellipse: Ellipse, parent_transform: Transform | None = None) -> EllipsePosition:
    if parent_transform is None:
        parent_transform = Transform.identity()

    t = parent_transform @ ellipse.local_transform

    # Closed-form SVD of the linear part: the unit circle maps to an ellipse
    # whose semi-axes are the singular values, rotated by the left angle.
    e = (t.a + t.d) / 2
    f = (t.a - t.d) / 2
    g = (t.b + t.c) / 2
    h = (t.b - t.c) / 2
    q = math.hypot(e, h)
    r = math.hypot(f, g)
    rotation = (math.atan2(h, e) + math.atan2(g, f)) / 2

    return EllipsePosition(
        center=Point(t.e, t.f),
        rx=q + r,
        ry=abs(q - r),
        rotation=rotation,
    )


def bounding_box(shape: Shape) -> Bounds:
    """
    The axis-aligned box around everything `shape` draws, resolved against
    the identity. Shapes without geometry (empty groups and curves) add
    nothing; a tree without any geometry gives a zero box at the origin.
    """
    boxes = [
        box
        for placement in walk(shape)
        if (box := _leaf_bounds(placement.shape, placement.transform)) is not None
    ]
    return Bounds.union(*boxes)


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """De Casteljau evaluation of a cubic Bezier."""
    a, b, c = p0.lerp(p1, t), p1.lerp(p2, t), p2.lerp(p3, t)
    d, e = a.lerp(b, t), b.lerp(c, t)
    return d.lerp(e, t)


def text_box(text: Text) -> Bounds:
    """
    Local box of a text run, before its transform. Uses the usual heuristic
    of an average glyph 0.6 times as wide as the font size.
    """
    width = len(text.content) * text.font_size * 0.6
    height = text.font_size

    match text.anchor:
        case "start":
            x = 0.0
        case "end":
            x = -width
        case _:
            x = -width / 2

    match text.baseline:
        case "top":
            y = 0.0
        case "bottom":
            y = -height
        case _:
            y = -height / 2

    return Bounds(x, y, width, height)


def _resolve_keypoints(
    keypoints: Iterable[Keypoint], t: Transform
) -> tuple[KeypointPosition, ...]:
    result: list[KeypointPosition] = []

    for k in keypoints:
        match k:
            case Bezier(start=None) if not result:
                raise GeometryError("The first keypoint of a curve must have a start point")
            case Bezier():
                result.append(
                    BezierPosition(
                        start_control=t.map(k.start_control),
                        end_control=t.map(k.end_control),
                        end=t.map(k.end),
                        start=None if k.start is None else t.map(k.start),
                    )
                )
            case Point():
                result.append(t.map(k))
            case _:
                raise GeometryError(f"Unknown keypoint: {k!r}")

    return tuple(result)


def _resolve_text(text: Text, t: Transform) -> TextPosition:
    on_curve = None

    if text.on_curve is not None:
        on_curve = CurvePosition(
            _resolve_keypoints(text.on_curve.keypoints, t @ text.on_curve.local_transform),
            text.on_curve.closed,
        )

    return TextPosition(
        text=text.content,
        anchor=text.anchor,
        baseline=text.baseline,
        font_weight=text.weight,
        font_size=text.font_size * t.uniform_scale,
        reference_start=t.map(Point.zero()),
        direction=t.map_vector(text.direction).normalize(),
        on_curve=on_curve,
        font=text.font,
    )


def _resolve_image(image: Image, t: Transform) -> ImagePosition:
    top_left = t.map(Point(-0.5, -0.5))
    top_right = t.map(Point(0.5, -0.5))
    bottom_right = t.map(Point(0.5, 0.5))
    bottom_left = t.map(Point(-0.5, 0.5))

    return ImagePosition(
        top_left=top_left,
        top_right=top_right,
        bottom_right=bottom_right,
        bottom_left=bottom_left,
        center=t.map(Point.zero()),
        width=top_left.distance(top_right),
        height=top_left.distance(bottom_left),
        rotation=(top_right - top_left).angle(),
        image=image,
    )


def _leaf_bounds(shape: Shape, parent_transform: Transform) -> Bounds | None:
    match shape:
        case Ellipse():
            return resolve_ellipse(shape, parent_transform).bounds()
        case Curve() | Line():
            curve = resolve(shape, parent_transform)
            return curve.bounds() if curve.keypoints else None
        case Text() if shape.on_curve is not None:
            return _resolve_text(shape, parent_transform @ shape.local_transform).on_curve.bounds()
        case Text():
            t = parent_transform @ shape.local_transform
            t = t @ Transform.rotation(shape.direction.angle())
            return Bounds.enclosing(t.map(p) for p in text_box(shape).corners())
        case Image():
            return resolve(shape, parent_transform).bounds()
        case _:
            return None
