from __future__ import annotations
from dataclasses import dataclass
from typing import overload


@dataclass(frozen=True)
class Color:
    """An sRGB color with 8-bit channels and a float alpha in [0, 1]."""

    r: int
    g: int
    b: int
    a: float = 1.0

    def __str__(self) -> str:
        return f"rgba({self.r},{self.g},{self.b},{self.a})"

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def as_rgb_float(self) -> tuple[float, float, float]:
        """Channels scaled to [0, 1], the form most document libraries expect."""
        return self.r / 255, self.g / 255, self.b / 255

    def transparent(self, alpha: float) -> Color:
        return Color(self.r, self.g, self.b, alpha)

    def lerp(self, other: Color, t: float) -> Color:
        return Color(
            round(self.r + (other.r - self.r) * t),
            round(self.g + (other.g - self.g) * t),
            round(self.b + (other.b - self.b) * t),
            self.a + (other.a - self.a) * t,
        )


class Colors:
    Transparent = Color(0, 0, 0, 0.0)
    Black = Color(0, 0, 0)
    White = Color(255, 255, 255)
    Gray = Color(128, 128, 128)
    Red = Color(255, 0, 0)
    Green = Color(0, 128, 0)
    Blue = Color(0, 0, 255)
    Yellow = Color(255, 255, 0)
    Orange = Color(255, 165, 0)
    Purple = Color(128, 0, 128)
    Pink = Color(255, 192, 203)
    Brown = Color(165, 42, 42)
    Cyan = Color(0, 255, 255)
    Magenta = Color(255, 0, 255)

    @classmethod
    def get(cls, name: str) -> Color:
        for key, value in vars(cls).items():
            if isinstance(value, Color) and key.lower() == name.lower():
                return value

        raise ValueError(f"Unknown color: {name}")


def rgb(r: int, g: int, b: int) -> Color:
    return Color(r, g, b)


def rgba(r: int, g: int, b: int, a: int) -> Color:
    """Builds a color from four 8-bit channels."""
    return Color(r, g, b, a / 255)


@overload
def hex(value: Color) -> str: ...


@overload
def hex(value: str) -> Color: ...


def hex(value: Color | str) -> str | Color:
    """Converts a color to its '#rrggbb' form, or parses such a string."""
    if isinstance(value, Color):
        return value.hex

    digits = value.lstrip("#")

    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)

    if len(digits) != 6:
        raise ValueError(f"Invalid hex color: {value}")

    return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
