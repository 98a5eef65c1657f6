"""
Unit tests for environment-driven settings.
"""

from pathlib import Path

import pytest

from card_engine.config import FONTS_DIR, Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("CARD_ENGINE_FONT", "CARD_ENGINE_FONTS_DIR",
                     "CARD_ENGINE_HTTP_TIMEOUT", "CARD_ENGINE_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert get_settings() == Settings(font=None, fonts_dir=FONTS_DIR, http_timeout=None, log_level="INFO")

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CARD_ENGINE_FONT", "DejaVuSans.ttf")
        monkeypatch.setenv("CARD_ENGINE_FONTS_DIR", str(tmp_path))
        monkeypatch.setenv("CARD_ENGINE_HTTP_TIMEOUT", "12.5")
        monkeypatch.setenv("CARD_ENGINE_LOG_LEVEL", "debug")

        settings = get_settings()

        assert settings.font == "DejaVuSans.ttf"
        assert settings.fonts_dir == Path(tmp_path)
        assert settings.http_timeout == 12.5
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["", "0", "-3"])
    def test_non_positive_timeout_means_unbounded(self, monkeypatch, raw):
        monkeypatch.setenv("CARD_ENGINE_HTTP_TIMEOUT", raw)
        assert get_settings().http_timeout is None

    def test_bad_timeout_rejected(self, monkeypatch):
        monkeypatch.setenv("CARD_ENGINE_HTTP_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            get_settings()
