"""Body geometry at export resolution, and its derivation for the preview.

Line breaks are decided once, with the export font size and the export
frame width. The preview takes that same LayoutResult and multiplies every
placed coordinate by a single ratio. The preview font has a legibility
floor, but that floor only changes how big the glyphs look; it is never
fed back into wrapping.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .constants import CoverConstants
from .font_config import DEFAULT_FONT_FAMILY
from .highlight import HighlightBandGeometry, compute_band, round_px
from .layout import (
    LayoutConfig,
    LayoutConfigError,
    LayoutEngine,
    LayoutResult,
    Line,
    MeasuredToken,
    ParagraphGap,
)
from .measure import TextMeasurer


@dataclass(frozen=True)
class Resolution:
    name: str
    width: int
    height: int


EXPORT_RESOLUTION = Resolution("export", CoverConstants.EXPORT_WIDTH, CoverConstants.EXPORT_HEIGHT)
PREVIEW_RESOLUTION = Resolution("preview", CoverConstants.PREVIEW_WIDTH, CoverConstants.PREVIEW_HEIGHT)


@dataclass(frozen=True)
class BodyTypography:
    """Proportions of the body text, shared by every resolution.

    Attributes:
        pad_ratio: Highlight pad as a fraction of the font size. The two
            historical values are 0.15 (raster export) and 0.08 (preview);
            whichever is chosen here is used by both.
        min_pad: Lower bound for the highlight pad, export pixels
        line_height_ratio: Line height as a multiple of the font size
        paragraph_gap: Gap between paragraphs as a fraction of line height
        font_scale: Editor font size to export pixels
        min_export_font_px: Floor of the export font size
        min_preview_font_px: Visual floor of the preview font size
        min_font_size: Smallest editor font size
        max_font_size: Largest editor font size
        margin_x: Left and right margin of the body frame, export pixels
        top: Top of the body frame, export pixels
    """
    pad_ratio: float = CoverConstants.HIGHLIGHT_PAD_RATIO
    min_pad: int = CoverConstants.MIN_HIGHLIGHT_PAD
    line_height_ratio: float = CoverConstants.LINE_HEIGHT_RATIO
    paragraph_gap: float = CoverConstants.PARAGRAPH_GAP_RATIO
    font_scale: float = CoverConstants.BODY_FONT_SCALE
    min_export_font_px: int = CoverConstants.MIN_EXPORT_FONT_PX
    min_preview_font_px: int = CoverConstants.MIN_PREVIEW_FONT_PX
    min_font_size: int = CoverConstants.BODY_FONT_SIZE_MIN
    max_font_size: int = CoverConstants.BODY_FONT_SIZE_MAX
    margin_x: int = CoverConstants.BODY_MARGIN_X
    top: int = CoverConstants.BODY_TOP


@dataclass(frozen=True)
class BodyMetrics:
    """Pixel quantities of the body at one resolution."""
    font_px: float  # Visual glyph size
    line_height: float
    highlight_pad: float
    frame_left: float
    frame_top: float
    frame_width: float


@dataclass(frozen=True)
class PlacedToken:
    token: MeasuredToken
    x: float  # Left edge, highlight padding included
    width: float
    text_x: float  # Where the glyphs start
    band: Optional[HighlightBandGeometry] = None


@dataclass(frozen=True)
class PlacedLine:
    x: float
    y: float  # Top of the line box
    width: float
    height: float
    text_y: float  # Top of the glyph box
    tokens: Tuple[PlacedToken, ...]


@dataclass(frozen=True)
class PlacedLayout:
    resolution: Resolution
    metrics: BodyMetrics
    lines: Tuple[PlacedLine, ...]

    def line_breaks(self) -> Tuple[Tuple[str, ...], ...]:
        return tuple(tuple(p.token.text for p in line.tokens) for line in self.lines)

    def scaled(self, ratio: float, resolution: Resolution, metrics: BodyMetrics) -> "PlacedLayout":
        """Same lines at another resolution; nothing is re-wrapped.

        Bands are the export bands times `ratio`, not recomputed from
        `metrics.font_px`; the two differ by at most a pixel of rounding.
        """
        lines = []
        for line in self.lines:
            tokens = tuple(
                replace(
                    placed,
                    x=placed.x * ratio,
                    width=placed.width * ratio,
                    text_x=placed.text_x * ratio,
                    band=placed.band.scaled(ratio) if placed.band else None,
                )
                for placed in line.tokens
            )
            y = line.y * ratio
            height = line.height * ratio
            lines.append(PlacedLine(
                x=line.x * ratio,
                y=y,
                width=line.width * ratio,
                height=height,
                text_y=y + (height - metrics.font_px) / 2,
                tokens=tokens,
            ))
        return PlacedLayout(resolution, metrics, tuple(lines))


class ResolutionAdapter:
    """Owns body geometry for the export and preview renderings."""

    def __init__(self, measurer: TextMeasurer,
                 typography: BodyTypography = BodyTypography(),
                 export: Resolution = EXPORT_RESOLUTION,
                 preview: Resolution = PREVIEW_RESOLUTION,
                 font_family: str = DEFAULT_FONT_FAMILY):
        if export.width <= 0 or export.height <= 0:
            raise LayoutConfigError(f"Invalid export resolution {export}")
        if preview.width * export.height != preview.height * export.width:
            raise LayoutConfigError(
                f"Preview {preview.width}x{preview.height} is not a uniform scale "
                f"of export {export.width}x{export.height}")
        self.typography = typography
        self.export = export
        self.preview = preview
        self.font_family = font_family
        self.engine = LayoutEngine(
            measurer,
            pad_ratio=typography.pad_ratio,
            min_pad=typography.min_pad,
            paragraph_gap=typography.paragraph_gap,
        )

    @property
    def scale(self) -> float:
        """Preview pixels per export pixel."""
        return self.preview.width / self.export.width

    @property
    def max_width(self) -> int:
        return self.export.width - 2 * self.typography.margin_x

    def clamp_font_size(self, font_size: Optional[float]) -> float:
        if not font_size:
            font_size = CoverConstants.DEFAULT_BODY_FONT_SIZE
        return min(self.typography.max_font_size, max(self.typography.min_font_size, font_size))

    def export_font_px(self, font_size: Optional[float]) -> int:
        size = self.clamp_font_size(font_size)
        return max(self.typography.min_export_font_px, round_px(size * self.typography.font_scale))

    def export_metrics(self, font_px: float) -> BodyMetrics:
        return BodyMetrics(
            font_px=font_px,
            line_height=round_px(font_px * self.typography.line_height_ratio),
            highlight_pad=self.engine.padding(font_px),
            frame_left=self.typography.margin_x,
            frame_top=self.typography.top,
            frame_width=self.max_width,
        )

    def preview_metrics(self, font_px: float) -> BodyMetrics:
        exported = self.export_metrics(font_px)
        ratio = self.scale
        return BodyMetrics(
            font_px=max(self.typography.min_preview_font_px, round_px(font_px * ratio)),
            line_height=exported.line_height * ratio,
            highlight_pad=exported.highlight_pad * ratio,
            frame_left=exported.frame_left * ratio,
            frame_top=exported.frame_top * ratio,
            frame_width=exported.frame_width * ratio,
        )

    def layout_config(self, text: str, highlight_word: str,
                      font_size: Optional[float]) -> LayoutConfig:
        return LayoutConfig(
            text=text or "",
            highlight_word=highlight_word or "",
            max_width=self.max_width,
            font_pixel_size=self.export_font_px(font_size),
            font_family=self.font_family,
        )

    def layout(self, text: str, highlight_word: str, font_size: Optional[float]) -> LayoutResult:
        """Wrap the body once, at export resolution."""
        return self.engine.layout(self.layout_config(text, highlight_word, font_size))

    def place_export(self, result: LayoutResult) -> PlacedLayout:
        """Absolute export coordinates for every line and token."""
        metrics = self.export_metrics(result.font_pixel_size)
        line_height = metrics.line_height
        y = metrics.frame_top
        lines: List[PlacedLine] = []

        for item in result.items:
            if isinstance(item, ParagraphGap):
                y += round_px(line_height * item.multiplier)
                continue
            lines.append(self._place_line(item, y, metrics))
            y += line_height

        return PlacedLayout(self.export, metrics, tuple(lines))

    def place_preview(self, result: LayoutResult) -> PlacedLayout:
        """Export placement scaled down; the wrapping is reused as is."""
        return self.place_export(result).scaled(
            self.scale, self.preview, self.preview_metrics(result.font_pixel_size))

    def _place_line(self, line: Line, y: float, metrics: BodyMetrics) -> PlacedLine:
        x = metrics.frame_left + round_px((metrics.frame_width - line.total_width) / 2)
        cursor = x
        placed: List[PlacedToken] = []
        for token in line.tokens:
            if token.is_highlight:
                band = compute_band(cursor, y, token.text_width, metrics.line_height,
                                    metrics.font_px, pad=metrics.highlight_pad)
                placed.append(PlacedToken(token, cursor, token.width,
                                          cursor + metrics.highlight_pad, band))
            else:
                placed.append(PlacedToken(token, cursor, token.width, cursor))
            cursor += token.width
        return PlacedLine(
            x=x,
            y=y,
            width=line.total_width,
            height=metrics.line_height,
            text_y=y + (metrics.line_height - metrics.font_px) / 2,
            tokens=tuple(placed),
        )
