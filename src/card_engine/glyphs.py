"""
Glyphs - Font lookup, symbolic glyph registry and sticker tile rendering.

A sticker icon is either a key registered here (drawn from an RGBA image)
or literal text such as an emoji, drawn with the first usable font in the
fallback chain.
"""

import logging
import math
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .config import get_settings

logger = logging.getLogger(__name__)

# Fonts with broad symbol / emoji coverage, tried in order
FALLBACK_FONTS = [
    "DejaVuSans.ttf",
    "NotoSansSymbols2-Regular.ttf",
    "NotoSans-Regular.ttf",
    "seguiemj.ttf",
    "seguisym.ttf",
    "Arial Unicode.ttf",
    "arial.ttf",
]

# Canvas default ink; color fonts keep their own colors
DEFAULT_INK = (0, 0, 0, 255)

# Transparent margin around the glyph ink inside its tile
TILE_PADDING = 2


def _try_truetype(path: Union[str, Path], size: int) -> Optional[ImageFont.FreeTypeFont]:
    try:
        return ImageFont.truetype(str(path), size)
    except OSError:
        return None


def get_font(size: int, font_name: Optional[str] = None):
    """
    Load a font with fallback chain.

    Priority: explicit name -> CARD_ENGINE_FONT -> fonts dir -> system
    fonts -> Pillow's built-in default.
    """
    settings = get_settings()
    candidates = [name for name in (font_name, settings.font) if name]
    candidates += FALLBACK_FONTS

    for name in candidates:
        # Project fonts directory first, then let FreeType search system paths
        local = settings.fonts_dir / name
        if local.exists():
            font = _try_truetype(local, size)
            if font is not None:
                return font
        if sys.platform == "win32":
            winpath = Path("C:/Windows/Fonts") / name
            if winpath.exists():
                font = _try_truetype(winpath, size)
                if font is not None:
                    return font
        font = _try_truetype(name, size)
        if font is not None:
            return font

    logger.warning("No glyph font found (tried %s), using Pillow default", ", ".join(candidates))
    return ImageFont.load_default(size=size)


class GlyphRegistry:
    """Maps symbolic sticker keys to RGBA images."""

    def __init__(self):
        self._glyphs: Dict[str, Image.Image] = {}

    def register(self, key: str, image: Image.Image) -> None:
        self._glyphs[key] = image.convert("RGBA")

    def register_file(self, key: str, path: Union[str, Path]) -> None:
        with Image.open(path) as img:
            self.register(key, img)

    def unregister(self, key: str) -> None:
        self._glyphs.pop(key, None)

    def get(self, key: str) -> Optional[Image.Image]:
        return self._glyphs.get(key)

    def __contains__(self, key) -> bool:
        return key in self._glyphs

    def __len__(self) -> int:
        return len(self._glyphs)


default_registry = GlyphRegistry()


def _image_tile(image: Image.Image, size: int) -> Image.Image:
    """Resize so the longer side equals ``size``, then pad."""
    ratio = size / max(image.width, image.height)
    new_w = max(1, round(image.width * ratio))
    new_h = max(1, round(image.height * ratio))
    resized = image.resize((new_w, new_h), Image.Resampling.LANCZOS)
    tile = Image.new("RGBA", (new_w + 2 * TILE_PADDING, new_h + 2 * TILE_PADDING), (0, 0, 0, 0))
    tile.paste(resized, (TILE_PADDING, TILE_PADDING))
    return tile


def _text_tile(text: str, size: int, ink: Tuple[int, ...], font_name: Optional[str]) -> Image.Image:
    font = get_font(size, font_name)
    probe = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    left, top, right, bottom = probe.textbbox((0, 0), text, font=font, embedded_color=True)

    # Draw with room to spare, then crop to the rasterized ink so the tile
    # center is the ink center regardless of font metrics
    margin = size
    canvas_size = (math.ceil(right - left) + 2 * margin, math.ceil(bottom - top) + 2 * margin)
    canvas = Image.new("RGBA", canvas_size, (0, 0, 0, 0))
    ImageDraw.Draw(canvas).text((margin - left, margin - top), text, font=font, fill=ink, embedded_color=True)
    box = canvas.getchannel("A").getbbox()
    if box is None:
        return Image.new("RGBA", (2 * TILE_PADDING, 2 * TILE_PADDING), (0, 0, 0, 0))

    glyph = canvas.crop(box)
    tile = Image.new("RGBA", (glyph.width + 2 * TILE_PADDING, glyph.height + 2 * TILE_PADDING), (0, 0, 0, 0))
    tile.paste(glyph, (TILE_PADDING, TILE_PADDING))
    return tile


def render_glyph(
    icon: str,
    size: int,
    registry: Optional[GlyphRegistry] = None,
    ink: Tuple[int, ...] = DEFAULT_INK,
    font_name: Optional[str] = None,
) -> Image.Image:
    """
    Rasterize one sticker glyph at base ``size`` into an RGBA tile whose
    center is the glyph center.
    """
    registry = default_registry if registry is None else registry
    image = registry.get(icon)
    if image is not None:
        return _image_tile(image, size)
    return _text_tile(icon, size, ink, font_name)
