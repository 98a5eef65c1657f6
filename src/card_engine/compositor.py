"""
Compositor - Layer-based card composition engine.

Composes a bordered card from a background frame and a list of stickers:

  1. canvas filled with the border color
  2. inner shading at the content rectangle's top-left corner
  3. background frame stretched over the content rectangle
  4. stickers in list order (later ones on top), each through one affine
     matrix, with a drop shadow, clipped to the canvas

All geometry is computed against the final output size; nothing is scaled
after drawing.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageFilter

from .errors import InvalidBorderColorError, RenderingUnavailableError
from .geometry import Affine, CardGeometry, bounding_box, border_fraction, clip_box, sticker_transform
from .glyphs import DEFAULT_INK, GlyphRegistry, default_registry, render_glyph
from .loader import load_image
from .models import CompositeRequest, CompositeResult, Sticker

logger = logging.getLogger(__name__)

# Inner shading: black, fading from this opacity to zero
SHADING_OPACITY = 0.15

# Sticker drop shadow, in canvas pixels
SHADOW_COLOR = (0, 0, 0)
SHADOW_OPACITY = 0.3
SHADOW_BLUR = 4
SHADOW_OFFSET = (2, 2)


def parse_color(color: str) -> Tuple[int, int, int, int]:
    """Any Pillow color string (hex, #RRGGBBAA, css name, rgb()) to RGBA."""
    try:
        return ImageColor.getcolor(color, "RGBA")
    except (ValueError, AttributeError, TypeError) as e:
        raise InvalidBorderColorError(color) from e


def allocate_canvas(width: int, height: int, color: Tuple[int, int, int, int]) -> Image.Image:
    """Opaque canvas of exactly ``width`` x ``height`` in the border color."""
    try:
        return Image.new("RGBA", (width, height), (*color[:3], 255))
    except (ValueError, MemoryError) as e:
        raise RenderingUnavailableError(f"Cannot allocate a {width}x{height} canvas: {e}") from e


def shading_overlay(geometry: CardGeometry) -> Optional[Image.Image]:
    """
    Diagonal gradient anchored at the content rectangle's top-left corner,
    painted into a top strip and a left strip half a border thick. It fades
    out completely one border-width (diagonally) from the corner, so only
    a (2b x 2b) region ever needs drawing.
    """
    b = geometry.border_px
    inset = geometry.inset
    if inset <= 0:
        return None

    region_w = min(2 * inset, geometry.content_width)
    region_h = min(2 * inset, geometry.content_height)
    strip = max(1, int(round(b * 0.5)))

    ys, xs = np.mgrid[0:region_h, 0:region_w].astype(np.float32)
    # Projection onto the (b, b) gradient vector, sampled at pixel centers
    t = np.clip(((xs + 0.5) + (ys + 0.5)) / (2 * b), 0.0, 1.0)
    alpha = (SHADING_OPACITY * (1.0 - t) * 255).round()
    in_strips = (ys < strip) | (xs < strip)
    alpha = np.where(in_strips, alpha, 0).astype(np.uint8)

    arr = np.zeros((region_h, region_w, 4), dtype=np.uint8)
    arr[:, :, 3] = alpha
    return Image.fromarray(arr, "RGBA")


def drop_shadow(layer: Image.Image) -> Image.Image:
    """Shadow of ``layer``'s alpha, offset and blurred, same size as ``layer``."""
    mask = Image.new("L", layer.size, 0)
    mask.paste(layer.getchannel("A"), SHADOW_OFFSET)
    mask = mask.filter(ImageFilter.GaussianBlur(radius=SHADOW_BLUR / 2))
    mask = mask.point(lambda a: int(round(a * SHADOW_OPACITY)))
    shadow = Image.new("RGBA", layer.size, (*SHADOW_COLOR, 0))
    shadow.putalpha(mask)
    return shadow


class Compositor:
    """Renders CompositeRequests into finished card rasters."""

    def __init__(
        self,
        registry: Optional[GlyphRegistry] = None,
        font_name: Optional[str] = None,
        ink: Tuple[int, ...] = DEFAULT_INK,
    ):
        self.registry = default_registry if registry is None else registry
        self.font_name = font_name
        self.ink = ink

    async def composite(self, request: CompositeRequest) -> CompositeResult:
        """
        Render ``request``. Raises InvalidBorderWidthError before loading
        anything, RenderingUnavailableError if no canvas can be allocated,
        and ImageLoadError if the frame cannot be loaded.
        """
        canvas, geometry = self._prepare(request)
        frame = await load_image(request.frame_image)
        return self._paint(canvas, geometry, frame.image, request)

    def render(self, frame: Image.Image, request: CompositeRequest) -> CompositeResult:
        """Synchronous variant for a frame that is already decoded."""
        canvas, geometry = self._prepare(request)
        return self._paint(canvas, geometry, frame, request)

    def _prepare(self, request: CompositeRequest) -> Tuple[Image.Image, CardGeometry]:
        border_fraction(request.border.width)
        color = parse_color(request.border.color)
        width, height = request.output_size

        canvas = allocate_canvas(width, height, color)
        geometry = CardGeometry.for_card(width, height, request.border.width)
        if not geometry.has_content:
            raise RenderingUnavailableError(
                f"No content area left in a {width}x{height} card with a "
                f"{request.border.width} border ({geometry.inset}px)"
            )
        return canvas, geometry

    def _paint(
        self,
        canvas: Image.Image,
        geometry: CardGeometry,
        frame: Image.Image,
        request: CompositeRequest,
    ) -> CompositeResult:
        logger.info(
            "Canvas: %dx%d, border %s (%.2fpx), %d sticker(s)",
            geometry.width, geometry.height, geometry.border_width,
            geometry.border_px, len(request.stickers),
        )

        shading = shading_overlay(geometry)
        if shading is not None:
            canvas.alpha_composite(shading, dest=(geometry.inset, geometry.inset))

        content = frame.convert("RGBA").resize(
            (geometry.content_width, geometry.content_height), Image.Resampling.LANCZOS
        )
        canvas.alpha_composite(content, dest=(geometry.inset, geometry.inset))

        for sticker in request.stickers:
            self._draw_sticker(canvas, geometry, sticker)

        return CompositeResult(canvas.convert("RGB"))

    def _draw_sticker(self, canvas: Image.Image, geometry: CardGeometry, sticker: Sticker) -> None:
        if sticker.scale == 0:
            logger.debug("Sticker %s has zero scale, skipping", sticker.id)
            return

        tile = render_glyph(sticker.icon, geometry.glyph_size, self.registry, self.ink, self.font_name)
        anchor = geometry.anchor(sticker.x, sticker.y)
        matrix = sticker_transform(anchor, sticker.rotation, sticker.scale,
                                   origin=(tile.width / 2, tile.height / 2))

        corners = [(0, 0), (tile.width, 0), (tile.width, tile.height), (0, tile.height)]
        pad = SHADOW_BLUR * 2 + max(abs(SHADOW_OFFSET[0]), abs(SHADOW_OFFSET[1]))
        box = bounding_box(matrix.apply_all(corners), pad=pad)

        clipped = clip_box(box, canvas.width, canvas.height)
        if clipped[2] <= clipped[0] or clipped[3] <= clipped[1]:
            logger.debug("Sticker %s lies outside the card, skipping", sticker.id)
            return

        # Rasterize only the visible part plus enough margin for the shadow blur
        left = max(clipped[0] - pad, box[0])
        top = max(clipped[1] - pad, box[1])
        right = min(clipped[2] + pad, box[2])
        bottom = min(clipped[3] + pad, box[3])

        # Output pixel (x, y) of the region sits at canvas (x + left, y + top)
        inverse = matrix.inverse() @ Affine.translation(left, top)
        glyph = tile.convert("RGBa").transform(
            (right - left, bottom - top),
            Image.Transform.AFFINE,
            inverse.coefficients,
            resample=Image.Resampling.BICUBIC,
        ).convert("RGBA")
        layer = Image.alpha_composite(drop_shadow(glyph), glyph)

        visible = layer.crop((clipped[0] - left, clipped[1] - top, clipped[2] - left, clipped[3] - top))
        canvas.alpha_composite(visible, dest=(clipped[0], clipped[1]))
        logger.debug(
            "Sticker %s '%s' at (%.1f,%.1f) scale=%s rotation=%s",
            sticker.id, sticker.icon, anchor[0], anchor[1], sticker.scale, sticker.rotation,
        )


async def composite(request: CompositeRequest, registry: Optional[GlyphRegistry] = None) -> CompositeResult:
    """Render ``request`` with a default Compositor."""
    return await Compositor(registry=registry).composite(request)
