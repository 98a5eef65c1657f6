"""
Geometry - Border fractions, content rectangle and sticker transforms.

The border thickness is a fixed fraction of the canvas width, calibrated
against the 360px-wide editor preview, so a card rendered at any width
shows the same proportional border. Stickers are placed in percentages of
the content rectangle (the card inside the border) and drawn through a
single affine matrix each.
"""

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, List, Tuple

from .errors import InvalidBorderWidthError

# Editor preview card width the border pixels were designed against
PREVIEW_WIDTH = 360

BORDER_FRACTIONS = {
    "narrow": Fraction(16, PREVIEW_WIDTH),   # 4.44%
    "medium": Fraction(24, PREVIEW_WIDTH),   # 6.67%
    "wide": Fraction(48, PREVIEW_WIDTH),     # 13.33%
}

# Glyph base size relative to the content width
STICKER_SIZE_RATIO = Fraction(11, 100)

Point = Tuple[float, float]


def border_fraction(width_name) -> Fraction:
    """Look up the border fraction; unknown names are a caller bug."""
    try:
        return BORDER_FRACTIONS[width_name]
    except (KeyError, TypeError):
        raise InvalidBorderWidthError(width_name) from None


def border_px(width_name, canvas_width: int) -> float:
    """Border thickness in pixels for a canvas of ``canvas_width``."""
    return float(border_fraction(width_name) * canvas_width)


@dataclass(frozen=True)
class Affine:
    """
    2x3 affine matrix mapping (x, y) -> (a*x + b*y + c, d*x + e*y + f).

    ``m1 @ m2`` applies m2 first, then m1.
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 1.0
    f: float = 0.0

    @classmethod
    def translation(cls, tx: float, ty: float) -> "Affine":
        return cls(1.0, 0.0, tx, 0.0, 1.0, ty)

    @classmethod
    def rotation(cls, degrees: float) -> "Affine":
        # y grows downward, so a positive angle turns clockwise on screen
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        return cls(cos, -sin, 0.0, sin, cos, 0.0)

    @classmethod
    def scaling(cls, s: float) -> "Affine":
        return cls(s, 0.0, 0.0, 0.0, s, 0.0)

    def __matmul__(self, other: "Affine") -> "Affine":
        return Affine(
            self.a * other.a + self.b * other.d,
            self.a * other.b + self.b * other.e,
            self.a * other.c + self.b * other.f + self.c,
            self.d * other.a + self.e * other.d,
            self.d * other.b + self.e * other.e,
            self.d * other.c + self.e * other.f + self.f,
        )

    def inverse(self) -> "Affine":
        det = self.a * self.e - self.b * self.d
        if det == 0:
            raise ZeroDivisionError("Affine matrix is singular")
        a, b = self.e / det, -self.b / det
        d, e = -self.d / det, self.a / det
        return Affine(a, b, -(a * self.c + b * self.f), d, e, -(d * self.c + e * self.f))

    def apply(self, x: float, y: float) -> Point:
        return (self.a * x + self.b * y + self.c, self.d * x + self.e * y + self.f)

    def apply_all(self, points: Iterable[Point]) -> List[Point]:
        return [self.apply(x, y) for x, y in points]

    @property
    def coefficients(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)


def sticker_transform(anchor: Point, rotation: float, scale: float, origin: Point = (0.0, 0.0)) -> Affine:
    """
    Full transform for one sticker: translate(anchor) . rotate . scale,
    with ``origin`` (the glyph center in its own tile) moved to (0, 0) first.
    """
    return (
        Affine.translation(*anchor)
        @ Affine.rotation(rotation)
        @ Affine.scaling(scale)
        @ Affine.translation(-origin[0], -origin[1])
    )


@dataclass(frozen=True)
class CardGeometry:
    """Pixel layout of one card: canvas, border inset and content rectangle."""

    width: int
    height: int
    border_width: str
    border_px: float
    inset: int

    @classmethod
    def for_card(cls, width: int, height: int, border_width) -> "CardGeometry":
        px = border_px(border_width, width)
        return cls(width, height, border_width, px, int(round(px)))

    @property
    def content_box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) of the content rectangle, right/bottom exclusive."""
        return (self.inset, self.inset, self.width - self.inset, self.height - self.inset)

    @property
    def content_width(self) -> int:
        return self.width - 2 * self.inset

    @property
    def content_height(self) -> int:
        return self.height - 2 * self.inset

    @property
    def has_content(self) -> bool:
        return self.content_width > 0 and self.content_height > 0

    @property
    def glyph_size(self) -> int:
        return max(1, math.floor(self.content_width * STICKER_SIZE_RATIO))

    def anchor(self, x_pct: float, y_pct: float) -> Point:
        """Percentages of the content rectangle -> canvas pixel coordinates."""
        return (
            self.inset + (x_pct / 100.0) * self.content_width,
            self.inset + (y_pct / 100.0) * self.content_height,
        )


def bounding_box(points: Iterable[Point], pad: int = 0) -> Tuple[int, int, int, int]:
    """Integer (left, top, right, bottom) enclosing all points, grown by ``pad``."""
    xs, ys = zip(*points)
    return (
        math.floor(min(xs)) - pad,
        math.floor(min(ys)) - pad,
        math.ceil(max(xs)) + pad,
        math.ceil(max(ys)) + pad,
    )


def clip_box(box: Tuple[int, int, int, int], width: int, height: int) -> Tuple[int, int, int, int]:
    """Intersect ``box`` with the canvas; an empty result has right <= left."""
    left, top, right, bottom = box
    return (max(left, 0), max(top, 0), min(right, width), min(bottom, height))
