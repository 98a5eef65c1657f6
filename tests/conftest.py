"""Shared fixtures: in-memory frames and a glyph registry of solid squares."""

import pytest
from PIL import Image

from card_engine.glyphs import GlyphRegistry

from tests.helpers import png_bytes


@pytest.fixture
def red_frame() -> bytes:
    return png_bytes((255, 0, 0))


@pytest.fixture
def white_frame() -> bytes:
    return png_bytes((255, 255, 255))


@pytest.fixture
def transparent_frame() -> bytes:
    return png_bytes((0, 0, 0, 0), mode="RGBA")


@pytest.fixture
def square_registry() -> GlyphRegistry:
    registry = GlyphRegistry()
    registry.register("blue_square", Image.new("RGB", (10, 10), (0, 0, 255)))
    registry.register("green_square", Image.new("RGB", (10, 10), (0, 255, 0)))
    return registry
