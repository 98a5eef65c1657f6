"""
Unit tests for the immutable editing draft.
"""

from unittest.mock import patch

import pytest

from card_engine.editor import CardDraft
from card_engine.models import BorderSpec, Sticker


class TestCardDraft:
    def test_defaults(self):
        draft = CardDraft()

        assert draft.stickers == ()
        assert draft.border_color == "#FFFFFF"
        assert draft.border_width == "narrow"

    def test_add_sticker_places_at_center(self):
        draft = CardDraft().add_sticker("★", sticker_id=1)

        assert draft.stickers == (Sticker(id=1, icon="★", x=50, y=50, scale=1, rotation=0),)

    def test_add_returns_new_draft(self):
        original = CardDraft()
        updated = original.add_sticker("★", sticker_id=1)

        assert original.stickers == ()
        assert updated is not original

    def test_generated_ids_are_unique(self):
        with patch("card_engine.editor.time.time", return_value=1700000000.0):
            draft = CardDraft().add_sticker("★").add_sticker("♥").add_sticker("🎉")

        ids = [s.id for s in draft.stickers]
        assert ids == [1700000000000, 1700000000001, 1700000000002]

    def test_duplicate_explicit_id_rejected(self):
        draft = CardDraft().add_sticker("★", sticker_id=1)

        with pytest.raises(ValueError):
            draft.add_sticker("♥", sticker_id=1)

    def test_new_stickers_go_on_top(self):
        draft = CardDraft().add_sticker("★", sticker_id=1).add_sticker("♥", sticker_id=2)

        assert [s.icon for s in draft.stickers] == ["★", "♥"]

    def test_update_sticker(self):
        draft = CardDraft().add_sticker("★", sticker_id=1).add_sticker("♥", sticker_id=2)

        updated = draft.update_sticker(2, x=10, rotation=45, scale=1.5)

        assert updated.stickers[1] == Sticker(id=2, icon="♥", x=10, y=50, scale=1.5, rotation=45)
        assert updated.stickers[0] == draft.stickers[0]

    def test_update_unknown_id_is_noop(self):
        draft = CardDraft().add_sticker("★", sticker_id=1)

        assert draft.update_sticker(99, x=0) == draft

    def test_update_unknown_field_rejected(self):
        draft = CardDraft().add_sticker("★", sticker_id=1)

        with pytest.raises(TypeError):
            draft.update_sticker(1, colour="red")
        with pytest.raises(TypeError):
            draft.update_sticker(1, id=5)

    def test_remove_and_clear(self):
        draft = CardDraft().add_sticker("★", sticker_id=1).add_sticker("♥", sticker_id=2)

        assert [s.id for s in draft.remove_sticker(1).stickers] == [2]
        assert draft.clear_stickers().stickers == ()

    def test_with_border_keeps_unset_values(self):
        draft = CardDraft().with_border(color="#000000")

        assert (draft.border_color, draft.border_width) == ("#000000", "narrow")
        assert draft.with_border(width="wide").border_width == "wide"

    def test_to_request(self):
        draft = (
            CardDraft()
            .with_frame("frame.png")
            .add_sticker("★", sticker_id=1)
            .with_border("#123456", "medium")
        )

        request = draft.to_request(width=2048, height=2868)

        assert request.frame_image == "frame.png"
        assert request.border == BorderSpec("#123456", "medium")
        assert request.stickers == draft.stickers
        assert request.output_size == (2048, 2868)

    def test_to_request_requires_frame(self):
        with pytest.raises(ValueError):
            CardDraft().to_request()
