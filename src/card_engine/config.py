"""
Settings - Ambient configuration read from the environment.

Values come from process environment variables, with a project-level .env
file loaded first (python-dotenv). Nothing here changes compositing
geometry; it only controls font lookup, HTTP fetching and log verbosity.

  CARD_ENGINE_FONT          font file path or font name used for glyphs
  CARD_ENGINE_FONTS_DIR     directory searched for bundled fonts
  CARD_ENGINE_HTTP_TIMEOUT  seconds before an image URL fetch gives up
  CARD_ENGINE_LOG_LEVEL     logging level for the command line
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent.parent
DATA_DIR = BASE_DIR / "data"
FONTS_DIR = DATA_DIR / "fonts"


@dataclass(frozen=True)
class Settings:
    font: Optional[str] = None
    fonts_dir: Path = FONTS_DIR
    http_timeout: Optional[float] = None
    log_level: str = "INFO"


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
    return value if value > 0 else None


def get_settings() -> Settings:
    """Build settings from the current environment."""
    fonts_dir = os.getenv("CARD_ENGINE_FONTS_DIR")
    return Settings(
        font=os.getenv("CARD_ENGINE_FONT") or None,
        fonts_dir=Path(fonts_dir) if fonts_dir else FONTS_DIR,
        http_timeout=_optional_float("CARD_ENGINE_HTTP_TIMEOUT"),
        log_level=os.getenv("CARD_ENGINE_LOG_LEVEL", "INFO").upper(),
    )
