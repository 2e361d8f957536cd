from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable


def deg(degrees: float) -> float:
    """Converts degrees to radians, the unit every rotation in vellum uses."""
    return math.radians(degrees)


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @classmethod
    def zero(cls) -> Point:
        return cls(0, 0)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    def __truediv__(self, k: float) -> Point:
        return Point(self.x / k, self.y / k)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Point:
        m = self.magnitude()

        if m == 0:
            return self

        return Point(self.x / m, self.y / m)

    def distance(self, other: Point) -> float:
        return (self - other).magnitude()

    def lerp(self, other: Point, t: float) -> Point:
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def angle(self) -> float:
        """Angle of the vector with the x axis, in radians."""
        return math.atan2(self.y, self.x)


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def topleft(self) -> Point:
        return Point(self.x, self.y)

    @property
    def topright(self) -> Point:
        return Point(self.x + self.width, self.y)

    @property
    def bottomleft(self) -> Point:
        return Point(self.x, self.y + self.height)

    @property
    def bottomright(self) -> Point:
        return Point(self.x + self.width, self.y + self.height)

    def corners(self) -> list[Point]:
        return [self.topleft, self.topright, self.bottomright, self.bottomleft]

    def padded(self, amount: float) -> Bounds:
        """Returns a new Bounds expanded by the given padding amount on all sides."""
        return Bounds(
            x=self.x - amount,
            y=self.y - amount,
            width=self.width + 2 * amount,
            height=self.height + 2 * amount,
        )

    @classmethod
    def enclosing(cls, points: Iterable[Point]) -> Bounds:
        """The axis-aligned box around a set of points (zero box when empty)."""
        points = list(points)

        if not points:
            return Bounds(0, 0, 0, 0)

        xs = [p.x for p in points]
        ys = [p.y for p in points]

        return Bounds(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    @classmethod
    def union(cls, *bounds: Bounds) -> Bounds:
        """Computes the minimal bounding box that contains all given bounds."""
        if not bounds:
            return Bounds(0, 0, 0, 0)

        x_min = min(b.x for b in bounds)
        y_min = min(b.y for b in bounds)
        x_max = max(b.x + b.width for b in bounds)
        y_max = max(b.y + b.height for b in bounds)

        return Bounds(x_min, y_min, x_max - x_min, y_max - y_min)


@dataclass(frozen=True)
class Transform:
    """
    A 2D affine transform stored as the matrix

        | a  c  e |
        | b  d  f |
        | 0  0  1 |

    `A @ B` is the matrix product, so `(A @ B).map(p) == A.map(B.map(p))`:
    B is applied first. Transforms are immutable; composing always builds a
    new one.
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> Transform:
        return cls()

    @classmethod
    def translation(cls, dx: float, dy: float) -> Transform:
        return cls(e=dx, f=dy)

    @classmethod
    def rotation(cls, theta: float) -> Transform:
        cos, sin = math.cos(theta), math.sin(theta)
        return cls(a=cos, b=sin, c=-sin, d=cos)

    @classmethod
    def scaling(cls, sx: float, sy: float | None = None) -> Transform:
        return cls(a=sx, d=sx if sy is None else sy)

    def __matmul__(self, other: Transform) -> Transform:
        return Transform(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def map(self, p: Point) -> Point:
        return Point(
            self.a * p.x + self.c * p.y + self.e,
            self.b * p.x + self.d * p.y + self.f,
        )

    def map_vector(self, v: Point) -> Point:
        """Maps a direction: only the linear part applies, never the translation."""
        return Point(self.a * v.x + self.c * v.y, self.b * v.x + self.d * v.y)

    def inverse(self) -> Transform:
        det = self.determinant

        if det == 0:
            raise ValueError("Transform is not invertible")

        a, b, c, d = self.d / det, -self.b / det, -self.c / det, self.a / det
        return Transform(
            a=a,
            b=b,
            c=c,
            d=d,
            e=-(a * self.e + c * self.f),
            f=-(b * self.e + d * self.f),
        )

    @property
    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    @property
    def tx(self) -> float:
        return self.e

    @property
    def ty(self) -> float:
        return self.f

    @property
    def angle(self) -> float:
        """Rotation angle of the x axis, in radians."""
        return math.atan2(self.b, self.a)

    @property
    def sx(self) -> float:
        return math.hypot(self.a, self.b)

    @property
    def sy(self) -> float:
        # Signed so that reflections survive the decomposition
        sx = self.sx
        return self.determinant / sx if sx else math.hypot(self.c, self.d)

    @property
    def uniform_scale(self) -> float:
        """The scale factor of areas, as a length ratio."""
        return math.sqrt(abs(self.determinant))

    def is_identity(self) -> bool:
        return self == Transform.identity()
