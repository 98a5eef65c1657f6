"""
Card Engine - Compositing engine for decorated video-frame cards.

Modules:
  config      - Settings loaded from the environment / .env
  errors      - Exception taxonomy (load, rendering, border width and color)
  models      - Sticker, BorderSpec, CompositeRequest, CompositeResult
  geometry    - Border fraction table, content rectangle, affine transforms
  loader      - Async image loading (paths, URLs, data URIs, raw bytes)
  glyphs      - Font fallback chain, glyph registry, glyph rasterization
  compositor  - Layered composition: border, shading, frame, stickers
  editor      - Immutable sticker-editing draft producing requests
"""

from .errors import (
    CardEngineError, ImageLoadError, InvalidBorderColorError, InvalidBorderWidthError,
    RenderingUnavailableError,
)
from .models import Sticker, BorderSpec, CompositeRequest, CompositeResult
from .loader import LoadedImage, load_image
from .glyphs import GlyphRegistry, default_registry
from .compositor import Compositor, composite
from .editor import CardDraft

__version__ = "1.0.0"

__all__ = [
    "CardEngineError",
    "ImageLoadError",
    "InvalidBorderColorError",
    "InvalidBorderWidthError",
    "RenderingUnavailableError",
    "Sticker",
    "BorderSpec",
    "CompositeRequest",
    "CompositeResult",
    "LoadedImage",
    "load_image",
    "GlyphRegistry",
    "default_registry",
    "Compositor",
    "composite",
    "CardDraft",
]
