"""Highlight band geometry and the two band styles.

A highlighted run is drawn on a pill shaped band: the text width plus a
lateral pad on each side, a fixed fraction of the font size tall, centred
in its line. Both styles share that rectangle; only paint differs.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .constants import CoverConstants

RGBA = Tuple[int, int, int, int]


def round_px(value: float) -> int:
    """Round half up, the way the browser canvas does."""
    return int(math.floor(value + 0.5))


def highlight_padding(font_px: float, pad_ratio: float = CoverConstants.HIGHLIGHT_PAD_RATIO,
                      min_pad: float = CoverConstants.MIN_HIGHLIGHT_PAD) -> int:
    """Lateral pad on each side of a highlighted run."""
    return max(int(min_pad), round_px(font_px * pad_ratio))


@dataclass(frozen=True)
class HighlightBandGeometry:
    x: float
    y: float
    width: float
    height: float
    corner_radius: float
    border_width: float

    @property
    def box(self) -> Tuple[float, float, float, float]:
        """(x0, y0, x1, y1) corners."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def scaled(self, ratio: float) -> "HighlightBandGeometry":
        return HighlightBandGeometry(
            x=self.x * ratio,
            y=self.y * ratio,
            width=self.width * ratio,
            height=self.height * ratio,
            corner_radius=self.corner_radius * ratio,
            border_width=self.border_width * ratio,
        )


def compute_band(x: float, y: float, text_width: float, line_height: float,
                 font_px: float, pad: Optional[float] = None) -> HighlightBandGeometry:
    """Band for a highlighted token drawn at line origin (x, y).

    Args:
        x: Left edge of the token, padding included.
        y: Top of the line box.
        text_width: Width of the bare glyphs.
        line_height: Height of the line box.
        font_px: Font size the band is proportioned to.
        pad: Lateral pad; derived from font_px when omitted.
    """
    if pad is None:
        pad = highlight_padding(font_px)
    height = round_px(font_px * CoverConstants.BAND_HEIGHT_RATIO)
    border = max(CoverConstants.MIN_BAND_BORDER,
                 round_px(font_px * CoverConstants.BAND_BORDER_RATIO))
    return HighlightBandGeometry(
        x=x,
        y=y + round_px((line_height - height) / 2),
        width=text_width + 2 * pad,
        height=height,
        corner_radius=height / 2,
        border_width=border,
    )


@dataclass(frozen=True)
class BandGlow:
    color: RGBA
    blur: float
    offset_y: float


@dataclass(frozen=True)
class HighlightStyle:
    """Paint for a highlight band.

    Attributes:
        name: Variant name
        fill_stops: (offset, color) pairs of a left-to-right linear gradient
        text_color: Foreground color of the highlighted text
        glow: Soft shadow drawn under the band
        outline: Stroke color around the band, if any
        bottom_border: Accent stroke along the bottom edge, if any
    """
    name: str
    fill_stops: Tuple[Tuple[float, RGBA], ...]
    text_color: RGBA
    glow: BandGlow
    outline: Optional[RGBA] = None
    bottom_border: Optional[RGBA] = None


class HighlightVariant(Enum):
    MARKER = "marker"
    GRADIENT = "gradient"


MARKER_STYLE = HighlightStyle(
    name=HighlightVariant.MARKER.value,
    fill_stops=(
        (0.0, (255, 235, 59, 242)),
        (0.5, (255, 245, 59, 204)),
        (1.0, (255, 235, 59, 242)),
    ),
    text_color=(26, 32, 44, 255),
    glow=BandGlow(color=(255, 193, 7, 102), blur=9, offset_y=3),
    outline=(255, 255, 255, 153),
    bottom_border=(255, 193, 7, 179),
)

GRADIENT_STYLE = HighlightStyle(
    name=HighlightVariant.GRADIENT.value,
    fill_stops=(
        (0.0, (255, 107, 156, 255)),
        (0.25, (255, 142, 83, 255)),
        (0.5, (255, 209, 102, 255)),
        (0.75, (78, 205, 196, 255)),
        (1.0, (167, 139, 250, 255)),
    ),
    text_color=(255, 255, 255, 255),
    glow=BandGlow(color=(255, 107, 156, 102), blur=9, offset_y=3),
    outline=(255, 255, 255, 77),
)

HIGHLIGHT_STYLES = {
    HighlightVariant.MARKER: MARKER_STYLE,
    HighlightVariant.GRADIENT: GRADIENT_STYLE,
}


def get_highlight_style(use_gradient: bool) -> HighlightStyle:
    """Style chosen by the cover's gradient switch."""
    variant = HighlightVariant.GRADIENT if use_gradient else HighlightVariant.MARKER
    return HIGHLIGHT_STYLES[variant]
