from __future__ import annotations
import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Literal, Self, TYPE_CHECKING, TypeAlias

from PIL import Image as PILImage

from .color import Color
from .core import Bounds, Point, Transform
from .fonts import FontRef, FontWeight

if TYPE_CHECKING:
    from .position import Position


# Kappa is the magic number for bezier circles
KAPPA = 0.552284749831


@dataclass(frozen=True)
class FullStroke:
    color: Color
    width: float


@dataclass(frozen=True)
class DashedStroke:
    color: Color
    width: float
    on: float
    off: float


Stroke: TypeAlias = FullStroke | DashedStroke
Fill: TypeAlias = Color


@dataclass(frozen=True)
class Bezier:
    """
    A cubic segment of a Curve. When `start` is None the segment continues
    from the end of the previous keypoint.
    """

    start_control: Point
    end_control: Point
    end: Point
    start: Point | None = None


Keypoint: TypeAlias = Point | Bezier


class Shape:
    """
    Base of every node in a shape tree.

    A shape only stores its transform relative to its parent. Absolute
    geometry is computed on demand by `vellum.position`, so moving a group
    moves everything below it.
    """

    def __init__(self, transform: Transform | None = None) -> None:
        self.parent: Shape | None = None
        self.local_transform: Transform = (
            transform if transform is not None else Transform.identity()
        )
        _register(self)

    def transformed(self, m: Transform) -> Self:
        """Appends `m` to the local transform; it acts in the shape's current frame."""
        self.local_transform = self.local_transform @ m
        return self

    def translated(self, dx: float, dy: float) -> Self:
        return self.transformed(Transform.translation(dx, dy))

    def rotated(self, theta: float) -> Self:
        return self.transformed(Transform.rotation(theta))

    def scaled(self, sx: float, sy: float | None = None) -> Self:
        return self.transformed(Transform.scaling(sx, sy))

    def bounds(self) -> Bounds:
        """The axis-aligned box of the shape, including its own transform."""
        from .position import bounding_box

        return bounding_box(self)

    def resolve(self, parent_transform: Transform | None = None) -> Position | list[Position]:
        from .position import resolve

        return resolve(self, parent_transform)

    def detach(self) -> Self:
        if isinstance(self.parent, Group):
            self.parent.remove(self)

        return self

    def clone(self) -> Self:
        """
        Returns a deep copy of the shape, detached from any parent.
        This is the only way to reuse a piece of geometry in two places.
        """
        parent, self.parent = self.parent, None

        try:
            return copy.deepcopy(self)
        finally:
            self.parent = parent

    def __add__(self, other: Shape) -> Group:
        """Enables the 'shape + shape' syntax to create groups."""
        return Group().add(self, other)


class Group(Shape):
    """A collection of shapes that behaves as a single unit."""

    stack: list[list[Shape]] = []

    @classmethod
    def current(cls) -> list[Shape] | None:
        if cls.stack:
            return cls.stack[-1]
        return None

    def __init__(
        self,
        shapes: Iterable[Shape] | None = None,
        transform: Transform | None = None,
        metadata: Iterable[tuple[str, str]] | None = None,
    ) -> None:
        super().__init__(transform)
        self.shapes: list[Shape] = []
        self.metadata: list[tuple[str, str]] = list(metadata or [])

        if shapes:
            self.add(*shapes)

    def add(self, *shapes: Shape, mode: Literal["strict", "loose"] = "strict") -> Self:
        """Adds shapes at the end of the draw order and returns self for chaining."""
        for shape in shapes:
            _claim(shape)
            _adopt(self, shape, mode)
            self.shapes.append(shape)

        return self

    def remove(self, shape: Shape) -> Self:
        self.shapes.remove(shape)
        shape.parent = None
        return self

    def annotate(self, key: str, value: str) -> Self:
        self.metadata.append((key, value))
        return self

    def __iadd__(self, other: Shape) -> Self:
        """Enables 'group += shape'."""
        return self.add(other)

    def __len__(self) -> int:
        return len(self.shapes)

    def __enter__(self):
        self.stack.append([])
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.add(*self.stack.pop(), mode="loose")


class Ellipse(Shape):
    """The unit circle, stretched and placed by its transform."""

    def as_curve(self) -> Curve:
        return Curve(unit_circle(), closed=True, transform=self.local_transform)


class Curve(Shape):
    def __init__(
        self,
        keypoints: Iterable[Keypoint] | None = None,
        closed: bool = False,
        transform: Transform | None = None,
    ) -> None:
        super().__init__(transform)
        self.keypoints: list[Keypoint] = list(keypoints or [])
        self.closed = closed

    def then(self, p: Point) -> Self:
        self.keypoints.append(p)
        return self

    def then_bezier(
        self,
        start_control: Point,
        end_control: Point,
        end: Point,
        start: Point | None = None,
    ) -> Self:
        self.keypoints.append(Bezier(start_control, end_control, end, start))
        return self

    def extend(self, keypoints: Iterable[Keypoint]) -> Self:
        self.keypoints.extend(keypoints)
        return self

    def close(self) -> Self:
        self.closed = True
        return self


class Line(Shape):
    """A straight segment; exported as a two point open curve."""

    def __init__(
        self,
        p1: Point | None = None,
        p2: Point | None = None,
        transform: Transform | None = None,
    ) -> None:
        super().__init__(transform)
        self.p1 = p1 or Point.zero()
        self.p2 = p2 or Point.zero()

    def as_curve(self) -> Curve:
        return Curve([self.p1, self.p2], transform=self.local_transform)


class Text(Shape):
    """
    A run of text anchored at the local origin.

    `anchor` aligns it horizontally and `baseline` vertically around that
    origin. `direction` is the local writing direction. With `on_curve` set
    the text follows that curve instead of a straight baseline.
    """

    def __init__(
        self,
        content: str,
        font_size: float = 12,
        font: FontRef | None = None,
        weight: FontWeight = "regular",
        anchor: Literal["start", "middle", "end"] = "middle",
        baseline: Literal["top", "middle", "bottom"] = "middle",
        direction: Point | None = None,
        on_curve: Curve | None = None,
        transform: Transform | None = None,
    ) -> None:
        super().__init__(transform)
        self.content = content
        self.font_size = font_size
        self.font = font
        self.weight: FontWeight = weight
        self.anchor = anchor
        self.baseline = baseline
        self.direction = direction or Point(1, 0)
        self.on_curve = on_curve

        if on_curve is not None:
            _claim(on_curve)
            _adopt(self, on_curve, "strict")


class Image(Shape):
    """
    RGBA8 pixels filling the unit square centred on the local origin.
    Scale the shape to give the picture its size.
    """

    def __init__(
        self,
        pixel_width: int,
        pixel_height: int,
        data: bytes,
        transform: Transform | None = None,
    ) -> None:
        super().__init__(transform)
        self.pixel_width = pixel_width
        self.pixel_height = pixel_height
        self.data = data

    @classmethod
    def from_pil(cls, image: PILImage.Image, transform: Transform | None = None) -> Image:
        rgba = image.convert("RGBA")
        return cls(rgba.width, rgba.height, rgba.tobytes(), transform)

    @classmethod
    def open(cls, path: str | Path, transform: Transform | None = None) -> Image:
        with PILImage.open(path) as image:
            return cls.from_pil(image, transform)

    def to_pil(self) -> PILImage.Image:
        return PILImage.frombytes("RGBA", (self.pixel_width, self.pixel_height), self.data)


class Style(Shape):
    """
    Decorates a shape with an optional fill and stroke.

    Styles nest: the innermost style wins for every field it sets, unset
    fields come from the enclosing styles. All transform operations go to
    the wrapped shape.
    """

    def __init__(
        self,
        shape: Shape,
        fill: Fill | None = None,
        stroke: Stroke | None = None,
    ) -> None:
        # The wrapped shape owns the transform, so Shape.__init__ is not called
        self.parent = None
        self.shape = shape
        self.fill = fill
        self.stroke = stroke

        _claim(shape)
        _adopt(self, shape, "strict")
        _register(self)

    @property
    def local_transform(self) -> Transform:
        return self.shape.local_transform

    @local_transform.setter
    def local_transform(self, value: Transform) -> None:
        self.shape.local_transform = value

    def filled(self, fill: Fill | None) -> Self:
        self.fill = fill
        return self

    def stroked(self, stroke: Stroke | None) -> Self:
        self.stroke = stroke
        return self


def unit_circle() -> list[Keypoint]:
    """Four cubic quadrants approximating the unit circle, starting at (1, 0)."""
    k = KAPPA

    return [
        Bezier(Point(1, k), Point(k, 1), Point(0, 1), start=Point(1, 0)),
        Bezier(Point(-k, 1), Point(-1, k), Point(-1, 0)),
        Bezier(Point(-1, -k), Point(-k, -1), Point(0, -1)),
        Bezier(Point(k, -1), Point(1, -k), Point(1, 0)),
    ]


def _register(shape: Shape) -> None:
    # Shapes created inside a `with group:` block join that group on exit
    pending = Group.current()

    if pending is not None:
        pending.append(shape)


def _claim(shape: Shape) -> None:
    pending = Group.current()

    if pending is not None:
        pending[:] = [s for s in pending if s is not shape]


def _adopt(parent: Shape, child: Shape, mode: Literal["strict", "loose"]) -> None:
    if child.parent is not None:
        if mode == "strict" or not isinstance(child.parent, Group):
            raise RuntimeError("This shape already has a parent")

        child.parent.remove(child)

    child.parent = parent
