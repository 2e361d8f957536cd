"""
Convenience constructors for common shapes.

Each one returns a plain Ellipse or Curve, so nothing here needs special
support from the resolver or the backends.
"""

from __future__ import annotations
import math
from typing import Iterable

from .base import Curve, Ellipse
from .core import Point


def circle(radius: float, center: Point | None = None) -> Ellipse:
    shape = Ellipse()

    if center is not None:
        shape.translated(center.x, center.y)

    return shape.scaled(radius)


def ellipse(rx: float, ry: float, center: Point | None = None) -> Ellipse:
    shape = Ellipse()

    if center is not None:
        shape.translated(center.x, center.y)

    return shape.scaled(rx, ry)


def rectangle(w: float, h: float) -> Curve:
    """A closed w x h rectangle centered at (0,0)."""
    hw, hh = w / 2, h / 2
    return Curve(
        [Point(-hw, -hh), Point(hw, -hh), Point(hw, hh), Point(-hw, hh)],
        closed=True,
    )


def square(size: float) -> Curve:
    return rectangle(size, size)


def polygon(n: int, radius: float, orientation: Point | None = None) -> Curve:
    """
    Creates a regular polygon centered at (0,0).

    Args:
        n: Number of sides (3=Triangle, 4=Diamond/Square, 6=Hexagon).
        radius: Distance from center to vertex.
        orientation: Vector pointing to the first vertex. Defaults to up (0, -1).
    """
    if n < 3:
        raise ValueError("Polygon must have at least 3 sides")

    if orientation is None:
        orientation = Point(0, -1)

    start_angle = orientation.angle()
    step = 2 * math.pi / n

    points = []
    for i in range(n):
        theta = start_angle + i * step
        points.append(Point(radius * math.cos(theta), radius * math.sin(theta)))

    return Curve(points, closed=True)


def triangle(base: float, side: float, angle: float) -> Curve:
    """
    A triangle with one side of length `base` along the x axis, starting at
    the origin, and a second side of length `side` leaving the origin at
    `angle` radians from it.
    """
    apex = Point(side * math.cos(angle), side * math.sin(angle))
    return Curve([Point.zero(), Point(base, 0), apex], closed=True)


def polyline(points: Iterable[Point], closed: bool = False) -> Curve:
    return Curve(points, closed=closed)
