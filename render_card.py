#!/usr/bin/env python3
"""
Render a decorated card from a request JSON file.

Usage:
    python render_card.py request.json
    python render_card.py request.json --output data/output/card.png
    python render_card.py request.json --width 2048 --height 2868
    python render_card.py request.json --glyph heart=data/stickers/heart.png

Request format (editor payload):
    {
      "frameImage": "data/frames/frame_03.png",
      "stickers": [{"id": 1, "icon": "★", "x": 50, "y": 50, "scale": 1, "rotation": 0}],
      "borderColor": "#FFFFFF",
      "borderWidth": "narrow"
    }
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from card_engine import CardEngineError, Compositor, CompositeRequest, GlyphRegistry
from card_engine.config import DATA_DIR, get_settings

logger = logging.getLogger("render_card")


def parse_glyph(value: str):
    key, sep, path = value.partition("=")
    if not sep or not key or not path:
        raise argparse.ArgumentTypeError(f"Expected KEY=PATH, got {value!r}")
    return key, Path(path)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Composite a frame, border and stickers into a card PNG"
    )
    parser.add_argument("request", type=Path, help="Path to the request JSON file")
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=DATA_DIR / "output" / "card.png",
        help="Output path (default: data/output/card.png)"
    )
    parser.add_argument("--width", type=int, default=None, help="Override output width")
    parser.add_argument("--height", type=int, default=None, help="Override output height")
    parser.add_argument("--font", type=str, default=None, help="Font file or name for glyphs")
    parser.add_argument(
        "--glyph",
        type=parse_glyph,
        action="append",
        default=[],
        metavar="KEY=PATH",
        help="Register an image sticker usable as an icon key (repeatable)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        with open(args.request, "r", encoding="utf-8") as f:
            payload = json.load(f)
        request = CompositeRequest.from_dict(payload)
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        print(f"ERROR: invalid request {args.request}: {e}", file=sys.stderr)
        return 1

    if args.width is not None or args.height is not None:
        request = replace(
            request,
            width=args.width if args.width is not None else request.width,
            height=args.height if args.height is not None else request.height,
        )

    # Relative frame paths are resolved against the request file
    if isinstance(request.frame_image, str) and "://" not in request.frame_image \
            and not request.frame_image.startswith("data:"):
        frame_path = Path(request.frame_image)
        if not frame_path.is_absolute():
            request = replace(request, frame_image=str(args.request.parent / frame_path))

    registry = GlyphRegistry()
    try:
        for key, path in args.glyph:
            registry.register_file(key, path)
    except OSError as e:
        print(f"ERROR: cannot load glyph image: {e}", file=sys.stderr)
        return 1

    compositor = Compositor(registry=registry, font_name=args.font)
    try:
        result = asyncio.run(compositor.composite(request))
    except CardEngineError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    out_path = result.save(args.output)
    logger.info("Saved: %s (%dx%d)", out_path, result.width, result.height)
    return 0


if __name__ == "__main__":
    sys.exit(main())
