"""Greedy line breaking for cover body text.

The engine turns a multi-paragraph body into lines of measured tokens that
fit a maximum width. It is run exactly once per layout request, at export
resolution; every other consumer reads the result instead of wrapping
again.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from .constants import CoverConstants
from .font_config import DEFAULT_FONT_FAMILY
from .highlight import highlight_padding
from .measure import TextMeasurer, measure_with_fallback
from .tokenizer import Token, tokenize


class LayoutConfigError(ValueError):
    """Raised for a layout request that cannot produce any geometry."""


@dataclass(frozen=True)
class MeasuredToken:
    text: str
    is_highlight: bool
    is_space: bool
    width: float  # Includes highlight padding
    text_width: float  # Bare glyph width


@dataclass(frozen=True)
class Line:
    tokens: Tuple[MeasuredToken, ...]
    total_width: float

    @property
    def text(self) -> str:
        return "".join(token.text for token in self.tokens)


@dataclass(frozen=True)
class ParagraphGap:
    multiplier: float = CoverConstants.PARAGRAPH_GAP_RATIO


LayoutItem = Union[Line, ParagraphGap]


@dataclass(frozen=True)
class LayoutResult:
    items: Tuple[LayoutItem, ...]
    max_width: float
    font_pixel_size: float

    @property
    def lines(self) -> List[Line]:
        return [item for item in self.items if isinstance(item, Line)]

    def line_breaks(self) -> Tuple[Tuple[str, ...], ...]:
        """Token texts grouped per line; equal for equal wrapping."""
        return tuple(tuple(token.text for token in line.tokens) for line in self.lines)


@dataclass(frozen=True)
class LayoutConfig:
    text: str
    highlight_word: str
    max_width: float
    font_pixel_size: float
    font_family: str = DEFAULT_FONT_FAMILY

    def validate(self) -> None:
        if not self.max_width > 0:
            raise LayoutConfigError(f"max_width must be positive, got {self.max_width}")
        if not self.font_pixel_size > 0:
            raise LayoutConfigError(
                f"font_pixel_size must be positive, got {self.font_pixel_size}")


MeasureToken = Callable[[Token], MeasuredToken]


def _decompose(token: MeasuredToken, max_width: float,
               measure_token: MeasureToken) -> List[MeasuredToken]:
    """Split an over-wide token into fragments that each fit.

    A single character wider than max_width becomes its own fragment.
    """
    if token.is_space or token.width <= max_width:
        return [token]

    pieces: List[MeasuredToken] = []
    buffer = ""
    for char in token.text:
        candidate = measure_token(Token(buffer + char, token.is_highlight))
        if buffer and candidate.width > max_width:
            pieces.append(measure_token(Token(buffer, token.is_highlight)))
            buffer = char
        else:
            buffer += char
    if buffer:
        pieces.append(measure_token(Token(buffer, token.is_highlight)))
    return pieces


def break_lines(tokens: List[Token], max_width: float,
                measure_token: MeasureToken) -> List[Line]:
    """Greedily fill lines no wider than max_width.

    Whitespace is never the first token of a line. A width exactly equal
    to max_width fits.
    """
    lines: List[Line] = []
    current: List[MeasuredToken] = []
    width = 0.0

    for token in tokens:
        for piece in _decompose(measure_token(token), max_width, measure_token):
            if current and width + piece.width > max_width:
                lines.append(Line(tuple(current), width))
                current = []
                width = 0.0
            if not current and piece.is_space:
                continue
            current.append(piece)
            width += piece.width

    if current:
        lines.append(Line(tuple(current), width))
    return lines


class _MeasureSession:
    """Measurement for one layout call, memoized by text."""

    def __init__(self, measurer: TextMeasurer, config: LayoutConfig, pad: float,
                 average_char_width: float):
        self.measurer = measurer
        self.font_px = config.font_pixel_size
        self.font_family = config.font_family
        self.pad = pad
        self.average_char_width = average_char_width
        self._widths: Dict[str, float] = {}

    def text_width(self, text: str) -> float:
        return measure_with_fallback(self.measurer, text, self.font_px, self.font_family,
                                     self.average_char_width, self._widths)

    def measure_token(self, token: Token) -> MeasuredToken:
        text_width = self.text_width(token.text)
        width = text_width + 2 * self.pad if token.is_highlight else text_width
        return MeasuredToken(token.text, token.is_highlight, token.is_space, width, text_width)


class LayoutEngine:
    """Wraps body text with an explicit measurer.

    Args:
        measurer: Width capability of the target surface.
        pad_ratio: Highlight pad as a fraction of the font size.
        min_pad: Lower bound for the highlight pad in pixels.
        paragraph_gap: Gap between paragraphs as a fraction of line height.
        average_char_width: Em fraction used when a glyph cannot be measured.
    """

    def __init__(self, measurer: TextMeasurer,
                 pad_ratio: float = CoverConstants.HIGHLIGHT_PAD_RATIO,
                 min_pad: float = CoverConstants.MIN_HIGHLIGHT_PAD,
                 paragraph_gap: float = CoverConstants.PARAGRAPH_GAP_RATIO,
                 average_char_width: float = CoverConstants.AVERAGE_CHAR_WIDTH):
        self.measurer = measurer
        self.pad_ratio = pad_ratio
        self.min_pad = min_pad
        self.paragraph_gap = paragraph_gap
        self.average_char_width = average_char_width

    def padding(self, font_px: float) -> int:
        return highlight_padding(font_px, self.pad_ratio, self.min_pad)

    def layout(self, config: LayoutConfig) -> LayoutResult:
        """Lay out every paragraph of config.text.

        Raises:
            LayoutConfigError: If max_width or font_pixel_size is not positive.
        """
        config.validate()
        session = _MeasureSession(self.measurer, config,
                                  self.padding(config.font_pixel_size),
                                  self.average_char_width)

        items: List[LayoutItem] = []
        text = config.text.replace("\r\n", "\n")
        paragraphs = text.split("\n") if text else []
        for index, paragraph in enumerate(paragraphs):
            if index > 0:
                items.append(ParagraphGap(self.paragraph_gap))
            tokens = tokenize(paragraph, config.highlight_word)
            items.extend(break_lines(tokens, config.max_width, session.measure_token))

        return LayoutResult(tuple(items), config.max_width, config.font_pixel_size)


def layout_text(config: LayoutConfig, measurer: TextMeasurer,
                pad_ratio: Optional[float] = None) -> LayoutResult:
    """Convenience wrapper around LayoutEngine.layout."""
    if pad_ratio is None:
        engine = LayoutEngine(measurer)
    else:
        engine = LayoutEngine(measurer, pad_ratio=pad_ratio)
    return engine.layout(config)
