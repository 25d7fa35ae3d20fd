"""Placement of every cover element, computed once per document.

A CoverScene holds absolute coordinates for one resolution. The export
scene is built from the document; the preview scene is derived from the
export scene, so both show the same line breaks.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .composition import CoverDocument
from .constants import CoverConstants
from .font_config import DEFAULT_FONT_FAMILY
from .highlight import HighlightStyle, get_highlight_style
from .measure import FontMetricsMeasurer, TextMeasurer, measure_with_fallback
from .resolution import BodyTypography, PlacedLayout, Resolution, ResolutionAdapter
from .theme import RGBA, ColorTheme, get_theme, parse_color

logger = logging.getLogger(__name__)

TITLE_GRADIENT = ("#A855F7", "#22D3EE", "#FDE047", "#FF6B9C", "#4ECDC4")
TAG_GRADIENT = ("#667eea", "#764ba2")


@dataclass(frozen=True)
class TitleBox:
    text: str
    center_x: float
    y: float
    font_px: float
    left: float  # Extent of the gradient
    right: float


@dataclass(frozen=True)
class TagBox:
    text: str
    x: float
    y: float
    width: float
    height: float
    center_x: float
    text_y: float
    font_px: float
    fill_stops: Tuple[str, str]


@dataclass(frozen=True)
class StickerBox:
    symbol: str
    x: float
    y: float
    size: float
    rotation: float  # Degrees, clockwise
    scale: float = 1.0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.size / 2, self.y + self.size / 2)


@dataclass(frozen=True)
class CoverScene:
    resolution: Resolution
    background: RGBA
    pattern: str
    pattern_step: float
    theme: ColorTheme
    use_gradient: bool
    highlight_style: HighlightStyle
    font_family: str
    title: TitleBox
    body: PlacedLayout
    tag: TagBox
    stickers: Tuple[StickerBox, ...]

    @property
    def width(self) -> int:
        return self.resolution.width

    @property
    def height(self) -> int:
        return self.resolution.height


def _background(color: str) -> RGBA:
    try:
        return parse_color(color)
    except ValueError:
        logger.warning(f"Invalid background color {color!r}, using white")
        return (255, 255, 255, 255)


class SceneBuilder:
    """Builds export and preview scenes around one ResolutionAdapter."""

    def __init__(self, measurer: Optional[TextMeasurer] = None,
                 typography: BodyTypography = BodyTypography(),
                 font_family: str = DEFAULT_FONT_FAMILY):
        self.measurer = measurer or FontMetricsMeasurer()
        self.font_family = font_family
        self.adapter = ResolutionAdapter(self.measurer, typography, font_family=font_family)

    def build(self, document: CoverDocument) -> CoverScene:
        """Export scene: lays the body out exactly once."""
        export = self.adapter.export
        width, height = export.width, export.height
        margin = self.adapter.typography.margin_x

        result = self.adapter.layout(document.text.body, document.text.highlight,
                                     document.body_font_size)
        body = self.adapter.place_export(result)

        title = TitleBox(
            text=document.text.title or "",
            center_x=width / 2,
            y=CoverConstants.TITLE_TOP,
            font_px=CoverConstants.TITLE_FONT_PX,
            left=margin,
            right=width - margin,
        )

        tag_text = f"#{document.text.tag or ''}"
        tag_font = CoverConstants.TAG_FONT_PX
        tag_text_width = measure_with_fallback(self.measurer, tag_text, tag_font, self.font_family)
        tag_width = math.ceil(tag_text_width + CoverConstants.TAG_PAD_X * 2)
        tag_height = tag_font + CoverConstants.TAG_PAD_Y * 2
        tag_y = height - CoverConstants.TAG_BOTTOM - tag_height
        theme = get_theme(document.theme)
        tag = TagBox(
            text=tag_text,
            x=CoverConstants.TAG_LEFT,
            y=tag_y,
            width=tag_width,
            height=tag_height,
            center_x=CoverConstants.TAG_LEFT + round(tag_width / 2),
            text_y=tag_y + CoverConstants.TAG_PAD_Y,
            font_px=tag_font,
            fill_stops=TAG_GRADIENT if document.use_gradient else (theme.secondary, theme.accent),
        )

        ratio = export.width / self.adapter.preview.width
        stickers = tuple(
            StickerBox(
                symbol=sticker.symbol,
                x=sticker.x * ratio,
                y=sticker.y * ratio,
                size=max(CoverConstants.STICKER_MIN_PX,
                         round(CoverConstants.STICKER_BASE_PX * sticker.scale)),
                rotation=sticker.rotation,
                scale=sticker.scale,
            )
            for sticker in document.stickers
        )

        return CoverScene(
            resolution=export,
            background=_background(document.background_color),
            pattern=document.pattern,
            pattern_step=CoverConstants.NOTEBOOK_STEP,
            theme=theme,
            use_gradient=document.use_gradient,
            highlight_style=get_highlight_style(document.use_gradient),
            font_family=self.font_family,
            title=title,
            body=body,
            tag=tag,
            stickers=stickers,
        )

    def preview(self, scene: CoverScene) -> CoverScene:
        """Preview scene derived from an export scene without re-wrapping."""
        ratio = self.adapter.scale
        preview = self.adapter.preview
        metrics = self.adapter.preview_metrics(scene.body.metrics.font_px)
        title, tag = scene.title, scene.tag
        return CoverScene(
            resolution=preview,
            background=scene.background,
            pattern=scene.pattern,
            pattern_step=scene.pattern_step * ratio,
            theme=scene.theme,
            use_gradient=scene.use_gradient,
            highlight_style=scene.highlight_style,
            font_family=scene.font_family,
            title=TitleBox(title.text, title.center_x * ratio, title.y * ratio,
                           title.font_px * ratio, title.left * ratio, title.right * ratio),
            body=scene.body.scaled(ratio, preview, metrics),
            tag=TagBox(tag.text, tag.x * ratio, tag.y * ratio, tag.width * ratio,
                       tag.height * ratio, tag.center_x * ratio, tag.text_y * ratio,
                       tag.font_px * ratio, tag.fill_stops),
            stickers=tuple(
                StickerBox(s.symbol, s.x * ratio, s.y * ratio,
                           CoverConstants.STICKER_PREVIEW_PX * s.scale, s.rotation, s.scale)
                for s in scene.stickers
            ),
        )
