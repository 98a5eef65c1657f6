"""
Models - Value types passed into and out of the compositor.

All request-side types are frozen: the compositor never observes a request
that changes while it is drawing.
"""

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Tuple, Union

from PIL import Image

# Default card size keeps the 5:7 portrait ratio
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 1434

DEFAULT_BORDER_COLOR = "#FFFFFF"
DEFAULT_BORDER_WIDTH = "narrow"

ImageSource = Union[str, Path, bytes, bytearray]


@dataclass(frozen=True)
class Sticker:
    """A decorative glyph placed on the content area.

    ``x``/``y`` are percentages (0-100) of the content rectangle, origin
    top-left. ``rotation`` is in degrees, clockwise positive, about the
    glyph's own center.
    """

    id: Any
    icon: str
    x: float = 50.0
    y: float = 50.0
    scale: float = 1.0
    rotation: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "Sticker":
        return cls(
            id=data["id"],
            icon=data["icon"],
            x=float(data.get("x", 50)),
            y=float(data.get("y", 50)),
            scale=float(data.get("scale", 1)),
            rotation=float(data.get("rotation", 0)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "icon": self.icon,
            "x": self.x,
            "y": self.y,
            "scale": self.scale,
            "rotation": self.rotation,
        }


@dataclass(frozen=True)
class BorderSpec:
    color: str = DEFAULT_BORDER_COLOR
    width: str = DEFAULT_BORDER_WIDTH


@dataclass(frozen=True)
class CompositeRequest:
    """Everything one composite call needs.

    ``width``/``height`` left as None fall back to 1024x1434.
    """

    frame_image: ImageSource
    stickers: Tuple[Sticker, ...] = ()
    border: BorderSpec = field(default_factory=BorderSpec)
    width: Any = None
    height: Any = None

    def __post_init__(self):
        # Lists from callers are frozen into tuples so the request stays immutable
        if not isinstance(self.stickers, tuple):
            object.__setattr__(self, "stickers", tuple(self.stickers))

    @property
    def output_size(self) -> Tuple[int, int]:
        width = DEFAULT_WIDTH if self.width is None else int(self.width)
        height = DEFAULT_HEIGHT if self.height is None else int(self.height)
        return width, height

    @classmethod
    def from_dict(cls, data: dict) -> "CompositeRequest":
        """
        Build a request from a JSON-style payload.

        Accepts the editor's camelCase keys (frameImage, borderColor,
        borderWidth) as well as snake_case.
        """
        frame = data.get("frameImage", data.get("frame_image"))
        if frame is None:
            raise KeyError("frameImage")
        border_color = data.get("borderColor", data.get("border_color", DEFAULT_BORDER_COLOR))
        border_width = data.get("borderWidth", data.get("border_width", DEFAULT_BORDER_WIDTH))
        return cls(
            frame_image=frame,
            stickers=tuple(Sticker.from_dict(s) for s in data.get("stickers", [])),
            border=BorderSpec(color=border_color, width=border_width),
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass
class CompositeResult:
    """A finished, fully opaque card raster."""

    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def to_png_bytes(self) -> bytes:
        buf = BytesIO()
        self.image.save(buf, "PNG")
        return buf.getvalue()

    def save(self, path: Union[str, Path]) -> Path:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(str(out_path), "PNG")
        return out_path
