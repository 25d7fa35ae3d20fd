"""Generate a print-ready PDF of a cover.

The page is the export canvas, one point per export pixel. Body text is
set with the same reportlab font metrics that wrapped it, so lines land
exactly where the layout put them. Stickers are drawn as bitmaps.
"""

import io
import logging
from typing import List, Optional, Sequence

from reportlab.lib.colors import Color
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .composition import CoverDocument
from .font_config import DEFAULT_FONT_FAMILY, get_font_config
from .highlight import HighlightBandGeometry, HighlightStyle
from .measure import FontLoadError, FontMetricsMeasurer, register_pdf_font
from .raster import RasterExporter
from .resolution import BodyTypography
from .scene import TITLE_GRADIENT, CoverScene, SceneBuilder
from .theme import RGBA, parse_color, to_unit_rgb

logger = logging.getLogger(__name__)


def _color(rgba: RGBA) -> Color:
    return Color(*to_unit_rgb(rgba))


def _gradient(stops: Sequence[str]):
    colors = [_color(parse_color(c)) for c in stops]
    last = max(1, len(stops) - 1)
    return colors, [i / last for i in range(len(stops))]


class PDFExporter:
    """Generate PDF files for cover scenes."""

    def __init__(self, font_name: str = DEFAULT_FONT_FAMILY,
                 typography: BodyTypography = BodyTypography()):
        """Initialize PDF exporter.

        Args:
            font_name: Font family for title, body and tag.
            typography: Body proportions.

        Raises:
            FontLoadError: If the specified font cannot be loaded.
        """
        config = get_font_config(font_name)
        if config is None:
            raise FontLoadError(f"Unknown font: {font_name}")
        self.font_name = register_pdf_font(config)
        self.font_name_bold = register_pdf_font(config, bold=True)
        self.font_embedded = config.is_embedded
        self.measurer = FontMetricsMeasurer(font_name)
        self.builder = SceneBuilder(self.measurer, typography, font_name)
        self._raster: Optional[RasterExporter] = None

        # Track unprintable characters for warning
        self.unprintable_chars = set()
        self.has_unprintable = False

    def generate_pdf(self, document: CoverDocument, scene: Optional[CoverScene] = None) -> bytes:
        """Generate a one-page PDF.

        Args:
            document: The cover to draw.
            scene: Export scene already built for `document`, if any.

        Returns:
            Complete PDF document as bytes.
        """
        self.unprintable_chars = set()
        self.has_unprintable = False
        if scene is None:
            scene = self.builder.build(document)

        pdf_buffer = io.BytesIO()
        c = canvas.Canvas(pdf_buffer, pagesize=(scene.width, scene.height))
        c.setTitle(scene.title.text or "cover")

        self._draw_background(c, scene)
        self._draw_title(c, scene)
        self._draw_body(c, scene)
        self._draw_tag(c, scene)
        self._draw_stickers(c, scene)

        c.showPage()
        c.save()
        return pdf_buffer.getvalue()

    def _baseline(self, scene: CoverScene, top: float, font_name: str, font_px: float) -> float:
        """PDF baseline for glyphs whose box starts at `top` (y down)."""
        return scene.height - top - pdfmetrics.getAscent(font_name, font_px)

    def _draw_background(self, c: canvas.Canvas, scene: CoverScene) -> None:
        c.setFillColor(_color(scene.background))
        c.rect(0, 0, scene.width, scene.height, stroke=0, fill=1)
        if scene.pattern not in ("lines", "grid"):
            return
        c.saveState()
        c.setStrokeColorRGB(0, 0, 0)
        c.setStrokeAlpha(0.036)
        c.setLineWidth(6 if scene.pattern == "lines" else 3)
        lines: List[tuple] = []
        y = 0.0
        while y <= scene.height:
            lines.append((0, scene.height - y, scene.width, scene.height - y))
            y += scene.pattern_step
        if scene.pattern == "grid":
            x = 0.0
            while x <= scene.width:
                lines.append((x, 0, x, scene.height))
                x += scene.pattern_step
        c.lines(lines)
        c.restoreState()

    def _draw_title(self, c: canvas.Canvas, scene: CoverScene) -> None:
        title = scene.title
        if not title.text:
            return
        text = self._make_pdf_safe(title.text)
        baseline = self._baseline(scene, title.y, self.font_name_bold, title.font_px)

        if not scene.use_gradient:
            c.setFillColor(_color(parse_color(scene.theme.primary)))
            c.setFont(self.font_name_bold, title.font_px)
            c.drawCentredString(title.center_x, baseline, text)
            return

        width = pdfmetrics.stringWidth(text, self.font_name_bold, title.font_px)
        colors, positions = _gradient(TITLE_GRADIENT)
        c.saveState()
        text_object = c.beginText(title.center_x - width / 2, baseline)
        text_object.setFont(self.font_name_bold, title.font_px)
        text_object.setTextRenderMode(7)  # Clip to the glyph outlines
        text_object.textOut(text)
        c.drawText(text_object)
        c.linearGradient(title.left, baseline, title.right, baseline, colors, positions)
        c.restoreState()

    def _draw_band(self, c: canvas.Canvas, scene: CoverScene, band: HighlightBandGeometry,
                   style: HighlightStyle) -> None:
        bottom = scene.height - band.y - band.height
        # Shadings are opaque
        colors = [_color(color[:3] + (255,)) for _, color in style.fill_stops]
        positions = [offset for offset, _ in style.fill_stops]

        c.saveState()
        path = c.beginPath()
        path.roundRect(band.x, bottom, band.width, band.height, band.corner_radius)
        c.clipPath(path, stroke=0, fill=0)
        c.linearGradient(band.x, bottom, band.x + band.width, bottom, colors, positions,
                         extend=False)
        c.restoreState()

        c.saveState()
        c.setLineWidth(band.border_width)
        if style.bottom_border and band.width > 2 * band.corner_radius:
            c.setStrokeColor(_color(style.bottom_border))
            y = bottom + band.border_width / 2
            c.line(band.x + band.corner_radius, y, band.x + band.width - band.corner_radius, y)
        if style.outline:
            c.setStrokeColor(_color(style.outline))
            c.roundRect(band.x, bottom, band.width, band.height, band.corner_radius,
                        stroke=1, fill=0)
        c.restoreState()

    def _draw_body(self, c: canvas.Canvas, scene: CoverScene) -> None:
        metrics = scene.body.metrics
        style = scene.highlight_style
        primary = _color(parse_color(scene.theme.primary))

        for line in scene.body.lines:
            baseline = self._baseline(scene, line.text_y, self.font_name, metrics.font_px)
            for placed in line.tokens:
                if placed.band is not None:
                    self._draw_band(c, scene, placed.band, style)
                if placed.token.is_space:
                    continue
                c.setFont(self.font_name, metrics.font_px)
                c.setFillColor(_color(style.text_color) if placed.token.is_highlight else primary)
                c.drawString(placed.text_x, baseline, self._make_pdf_safe(placed.token.text))

    def _draw_tag(self, c: canvas.Canvas, scene: CoverScene) -> None:
        tag = scene.tag
        bottom = scene.height - tag.y - tag.height
        radius = tag.height / 2
        colors, positions = _gradient(tag.fill_stops)

        c.saveState()
        path = c.beginPath()
        path.roundRect(tag.x, bottom, tag.width, tag.height, radius)
        c.clipPath(path, stroke=0, fill=0)
        c.linearGradient(tag.x, bottom + tag.height, tag.x + tag.width, bottom, colors, positions)
        c.setFillColorRGB(1, 1, 1)
        c.setFillAlpha(0.3)
        c.rect(tag.x, bottom + tag.height * 2 / 3, tag.width, tag.height / 3, stroke=0, fill=1)
        c.restoreState()

        c.setFillColorRGB(1, 1, 1)
        c.setFont(self.font_name, tag.font_px)
        baseline = self._baseline(scene, tag.text_y, self.font_name, tag.font_px)
        c.drawCentredString(tag.center_x, baseline, self._make_pdf_safe(tag.text))

    def _draw_stickers(self, c: canvas.Canvas, scene: CoverScene) -> None:
        if not scene.stickers:
            return
        if self._raster is None:
            self._raster = RasterExporter(self.builder.font_family)
        for sticker in scene.stickers:
            tile = self._raster.sticker_tile(sticker.symbol, max(1, int(round(sticker.size))),
                                             sticker.rotation)
            cx, cy = sticker.center
            c.drawImage(ImageReader(tile), cx - tile.width / 2,
                        scene.height - cy - tile.height / 2,
                        width=tile.width, height=tile.height, mask='auto')

    def _make_pdf_safe(self, text: str) -> str:
        """Convert text to be safe for PDF output with a standard font.

        The standard PDF fonts support Windows-1252 encoding, which
        includes Latin-1 plus additional characters in the 0x80-0x9F range.
        Embedded fonts are left alone.

        Characters not in Windows-1252 are replaced with '?' and tracked
        for warning messages.
        """
        if self.font_embedded:
            return text
        result = []
        for char in text:
            try:
                char.encode('cp1252')
                result.append(char)
            except UnicodeEncodeError:
                self.unprintable_chars.add(char)
                self.has_unprintable = True
                result.append('?')
        return ''.join(result)

    def get_unprintable_warning(self) -> Optional[str]:
        """Get warning message about unprintable characters.

        Returns:
            Warning message if unprintable chars were found, None otherwise.
        """
        if not self.has_unprintable:
            return None

        char_list = sorted(self.unprintable_chars)
        formatted_chars = []
        for char in char_list[:10]:
            if ord(char) < 32 or ord(char) == 127:
                formatted_chars.append(f"U+{ord(char):04X}")
            else:
                formatted_chars.append(f"'{char}' (U+{ord(char):04X})")

        if len(char_list) > 10:
            formatted_chars.append(f"... and {len(char_list) - 10} more")

        return (f"Warning: {len(self.unprintable_chars)} unique unprintable character(s) "
                f"were replaced with '?' in the PDF output: {', '.join(formatted_chars)}")
