"""Text width measurement.

A measurer returns the rendered width, in pixels, of a string set in a
font family at a pixel size. The layout engine never touches a rendering
surface directly; it is handed one of these objects instead.
"""

import logging
import unicodedata
from abc import ABC, abstractmethod
from typing import Dict, Optional, Union

from PIL import ImageFont
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from .constants import CoverConstants
from .font_config import CJK_FONT_FAMILY, DEFAULT_FONT_FAMILY, FontConfig, get_font_config

logger = logging.getLogger(__name__)


class MeasurementError(Exception):
    """Raised when a measurer has no metrics for some of the text."""


class FontLoadError(Exception):
    """Exception raised when a font cannot be loaded."""


def estimate_width(text: str, font_px: float,
                   average_char_width: float = CoverConstants.AVERAGE_CHAR_WIDTH) -> float:
    """Estimate a width from character counts alone.

    East Asian wide and fullwidth characters count as a full em, everything
    else as `average_char_width` em.
    """
    total = 0.0
    for char in text:
        if unicodedata.east_asian_width(char) in ("W", "F"):
            total += CoverConstants.WIDE_CHAR_WIDTH
        else:
            total += average_char_width
    return total * font_px


class TextMeasurer(ABC):
    """Capability that measures text for one rendering surface."""

    @abstractmethod
    def measure(self, text: str, font_px: float, font_family: str) -> float:
        """Return the advance width of `text` in pixels.

        Raises:
            MeasurementError: If the font has no metrics for the text.
        """


def measure_with_fallback(measurer: TextMeasurer, text: str, font_px: float, font_family: str,
                          average_char_width: float = CoverConstants.AVERAGE_CHAR_WIDTH,
                          cache: Optional[Dict[str, float]] = None) -> float:
    """Measure `text`, estimating any character the measurer cannot handle.

    A failing string is measured again one character at a time, so only
    the characters without metrics are estimated. Any exception from the
    measurer counts as a failure. Widths are stored in `cache` when given.
    """
    if cache is not None and text in cache:
        return cache[text]
    try:
        width = measurer.measure(text, font_px, font_family)
    except Exception as e:
        if len(text) <= 1:
            logger.debug(f"Estimating width of {text!r}: {e}")
            width = estimate_width(text, font_px, average_char_width)
        else:
            width = sum(measure_with_fallback(measurer, char, font_px, font_family,
                                              average_char_width, cache)
                        for char in text)
    if cache is not None:
        cache[text] = width
    return width


class FixedAdvanceMeasurer(TextMeasurer):
    """Every character advances by `ratio` em. Deterministic everywhere."""

    def __init__(self, ratio: float = CoverConstants.AVERAGE_CHAR_WIDTH):
        self.ratio = ratio

    def measure(self, text: str, font_px: float, font_family: str) -> float:
        return self.ratio * font_px * len(text)


def register_pdf_font(config: FontConfig, bold: bool = False) -> str:
    """Make a configured font known to reportlab and return its name.

    Standard PDF fonts need no registration. Embedded fonts are loaded
    from the first candidate file that exists and that reportlab can parse.

    Raises:
        FontLoadError: If an embedded font has no usable file on this system.
    """
    name = config.pdf_bold_name if bold else config.pdf_name
    if not config.is_embedded or name in pdfmetrics.getRegisteredFontNames():
        return name

    paths = config.existing_font_files(bold=bold)
    if not paths and bold:
        # Use regular for bold if bold not found
        return register_pdf_font(config, bold=False)
    if not paths:
        raise FontLoadError(f"{config.name} font file not found in system fonts")

    errors = []
    for path in paths:
        try:
            font = TTFont(name, path)
        except Exception as e:
            # e.g. CFF outlines, which reportlab does not support
            logger.debug(f"Skipping {path} for {name}: {e}")
            errors.append(f"{path}: {e}")
            continue
        pdfmetrics.registerFont(font)
        logger.debug(f"Registered {name} from {path}")
        return name
    if bold:
        return register_pdf_font(config, bold=False)
    raise FontLoadError(f"Could not register {config.name} font: {'; '.join(errors)}")


def preferred_font_family() -> str:
    """Return the CJK family when reportlab can load it, else the default family."""
    try:
        register_pdf_font(get_font_config(CJK_FONT_FAMILY))
    except FontLoadError as e:
        logger.debug(f"Using {DEFAULT_FONT_FAMILY}: {e}")
        return DEFAULT_FONT_FAMILY
    return CJK_FONT_FAMILY


class FontMetricsMeasurer(TextMeasurer):
    """Measures with reportlab font metrics, no rendering surface needed.

    The standard PDF fonts only carry metrics for Windows-1252 characters;
    anything outside that range raises MeasurementError so the caller can
    fall back to an estimate. Each family is registered at most once per
    measurer; a failed registration is remembered.
    """

    def __init__(self, default_family: str = DEFAULT_FONT_FAMILY):
        self.default_family = default_family
        self._registered: Dict[str, Union[str, FontLoadError]] = {}

    def _resolve(self, font_family: str) -> FontConfig:
        config = get_font_config(font_family) or get_font_config(self.default_family)
        if config is None:
            raise FontLoadError(f"Unknown font: {font_family}")
        return config

    def _font_name(self, config: FontConfig) -> str:
        outcome = self._registered.get(config.name)
        if outcome is None:
            try:
                outcome = register_pdf_font(config)
            except FontLoadError as e:
                logger.warning(f"No metrics for {config.name}, estimating widths: {e}")
                outcome = e
            self._registered[config.name] = outcome
        if isinstance(outcome, FontLoadError):
            raise MeasurementError(str(outcome)) from outcome
        return outcome

    def measure(self, text: str, font_px: float, font_family: str) -> float:
        config = self._resolve(font_family)
        font_name = self._font_name(config)
        if not config.is_embedded:
            try:
                text.encode("cp1252")
            except UnicodeEncodeError as e:
                raise MeasurementError(f"No {font_name} metrics for {text!r}") from e
        return pdfmetrics.stringWidth(text, font_name, font_px)


class PillowMeasurer(TextMeasurer):
    """Measures with the FreeType font the raster exporter draws with."""

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.FreeTypeFont] = {}

    @classmethod
    def for_family(cls, font_family: str, bold: bool = False) -> "PillowMeasurer":
        config = get_font_config(font_family) or get_font_config(DEFAULT_FONT_FAMILY)
        return cls(config.find_font_file(bold=bold) if config else None)

    def font(self, font_px: float):
        size = max(1, int(round(font_px)))
        cached = self._fonts.get(size)
        if cached is not None:
            return cached
        if self.font_path:
            try:
                font = ImageFont.truetype(self.font_path, size)
            except OSError as e:
                raise FontLoadError(f"Could not load {self.font_path}: {e}")
        else:
            font = ImageFont.load_default(size=size)
        self._fonts[size] = font
        return font

    def measure(self, text: str, font_px: float, font_family: str) -> float:
        try:
            return float(self.font(font_px).getlength(text))
        except (FontLoadError, OSError, ValueError) as e:
            raise MeasurementError(str(e)) from e
