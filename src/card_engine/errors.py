"""Exceptions raised by the card engine. Every one aborts the composite call."""


class CardEngineError(Exception):
    """Base class for all card engine failures."""


class ImageLoadError(CardEngineError):
    """The background source could not be fetched or decoded."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class RenderingUnavailableError(CardEngineError):
    """No drawable surface could be allocated for the card."""


class InvalidBorderWidthError(CardEngineError, ValueError):
    """Border width is not one of narrow / medium / wide."""

    def __init__(self, width):
        super().__init__(
            f"Invalid border width {width!r}; expected one of: narrow, medium, wide"
        )
        self.width = width


class InvalidBorderColorError(CardEngineError, ValueError):
    """Border color is not a color string Pillow understands."""

    def __init__(self, color):
        super().__init__(f"Invalid border color {color!r}")
        self.color = color
