"""
Editor - Immutable sticker-editing draft.

Mirrors the editing actions of the card editor (add / update / remove /
clear stickers, pick a border) but every action returns a new draft, so a
request built from a draft can never change underneath the compositor.
"""

import time
from dataclasses import dataclass, fields, replace
from typing import Any, Optional, Tuple

from .models import (
    DEFAULT_BORDER_COLOR, DEFAULT_BORDER_WIDTH, BorderSpec, CompositeRequest, ImageSource, Sticker,
)

_STICKER_FIELDS = {f.name for f in fields(Sticker)} - {"id"}


def _new_sticker_id(existing: Tuple[Sticker, ...]) -> int:
    """Millisecond timestamp, bumped past any id already in use."""
    candidate = int(time.time() * 1000)
    numeric = [s.id for s in existing if isinstance(s.id, int)]
    if numeric and candidate <= max(numeric):
        candidate = max(numeric) + 1
    return candidate


@dataclass(frozen=True)
class CardDraft:
    frame_image: Optional[ImageSource] = None
    stickers: Tuple[Sticker, ...] = ()
    border_color: str = DEFAULT_BORDER_COLOR
    border_width: str = DEFAULT_BORDER_WIDTH

    def add_sticker(self, icon: str, sticker_id: Any = None) -> "CardDraft":
        """New sticker at the content center, unscaled and unrotated, on top."""
        sid = _new_sticker_id(self.stickers) if sticker_id is None else sticker_id
        if any(s.id == sid for s in self.stickers):
            raise ValueError(f"Sticker id {sid!r} already in use")
        return replace(self, stickers=self.stickers + (Sticker(id=sid, icon=icon),))

    def update_sticker(self, sticker_id: Any, **changes) -> "CardDraft":
        """Apply ``changes`` to one sticker; unknown ids leave the draft as is."""
        unknown = set(changes) - _STICKER_FIELDS
        if unknown:
            raise TypeError(f"Unknown sticker field(s): {', '.join(sorted(unknown))}")
        stickers = tuple(
            replace(s, **changes) if s.id == sticker_id else s for s in self.stickers
        )
        return replace(self, stickers=stickers)

    def remove_sticker(self, sticker_id: Any) -> "CardDraft":
        return replace(self, stickers=tuple(s for s in self.stickers if s.id != sticker_id))

    def clear_stickers(self) -> "CardDraft":
        return replace(self, stickers=())

    def with_border(self, color: Optional[str] = None, width: Optional[str] = None) -> "CardDraft":
        return replace(
            self,
            border_color=self.border_color if color is None else color,
            border_width=self.border_width if width is None else width,
        )

    def with_frame(self, frame_image: ImageSource) -> "CardDraft":
        return replace(self, frame_image=frame_image)

    def to_request(self, width: Optional[int] = None, height: Optional[int] = None) -> CompositeRequest:
        if self.frame_image is None:
            raise ValueError("Draft has no frame image to composite")
        return CompositeRequest(
            frame_image=self.frame_image,
            stickers=self.stickers,
            border=BorderSpec(color=self.border_color, width=self.border_width),
            width=width,
            height=height,
        )
