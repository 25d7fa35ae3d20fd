"""Render a cover to a bitmap with Pillow."""

import io
import logging
import os
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

from .composition import CoverDocument
from .font_config import DEFAULT_FONT_FAMILY, EMOJI_FONT_FILES, EMOJI_NATIVE_PX
from .highlight import HighlightBandGeometry, HighlightStyle
from .measure import PillowMeasurer
from .resolution import BodyTypography
from .scene import TITLE_GRADIENT, CoverScene, SceneBuilder, StickerBox
from .theme import RGBA, parse_color

logger = logging.getLogger(__name__)

Stops = Sequence[Tuple[float, RGBA]]

PATTERN_COLOR = (0, 0, 0, 9)  # rgba(0,0,0,0.06) at 60% opacity
TITLE_SHADOW = (0, 0, 0, 26)
TITLE_GLOWS = (((168, 85, 247, 102), 20), ((34, 211, 238, 77), 40))
TAG_SHADOW = (0, 0, 0, 51)
TAG_SHEEN = (255, 255, 255, 77)
TAG_TEXT = (255, 255, 255, 255)


def even_stops(colors: Sequence[str]) -> Tuple[Tuple[float, RGBA], ...]:
    """Spread hex colors evenly over 0..1."""
    last = max(1, len(colors) - 1)
    return tuple((i / last, parse_color(color)) for i, color in enumerate(colors))


def _lerp(a: int, b: int, t: float) -> int:
    return int(round(a + (b - a) * t))


def _color_at(stops: Stops, t: float) -> RGBA:
    if t <= stops[0][0]:
        return stops[0][1]
    for (o0, c0), (o1, c1) in zip(stops, stops[1:]):
        if t <= o1:
            local = (t - o0) / (o1 - o0) if o1 > o0 else 0.0
            return tuple(_lerp(a, b, local) for a, b in zip(c0, c1))  # type: ignore[return-value]
    return stops[-1][1]


def linear_gradient(size: Tuple[int, int], stops: Stops,
                    start: float = 0, end: Optional[float] = None) -> Image.Image:
    """Left to right gradient; colors are clamped outside [start, end]."""
    width, height = max(1, size[0]), max(1, size[1])
    if end is None:
        end = width - 1
    span = (end - start) or 1
    strip = Image.new("RGBA", (width, 1))
    pixels = strip.load()
    for x in range(width):
        t = min(1.0, max(0.0, (x - start) / span))
        pixels[x, 0] = _color_at(stops, t)
    return strip.resize((width, height), Image.Resampling.NEAREST)


def _composite(canvas: Image.Image, image: Image.Image, xy: Tuple[int, int]) -> None:
    """Alpha-composite `image` at `xy`, which may lie partly off canvas."""
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(image, xy)
    canvas.alpha_composite(layer)


def _shadow(mask: Image.Image, color: RGBA, blur: float) -> Image.Image:
    """Blurred single-color silhouette of `mask`."""
    shadow = Image.new("RGBA", mask.size, color[:3] + (0,))
    shadow.putalpha(mask.point(lambda v: v * color[3] // 255))
    return shadow.filter(ImageFilter.GaussianBlur(blur))


def _pill_mask(size: Tuple[int, int], radius: float) -> Image.Image:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        [0, 0, size[0] - 1, size[1] - 1], radius=int(round(radius)), fill=255)
    return mask


class RasterExporter:
    """Draws export scenes with the same FreeType fonts it measures with."""

    def __init__(self, font_family: str = DEFAULT_FONT_FAMILY,
                 typography: BodyTypography = BodyTypography()):
        self.font_family = font_family
        self.measurer = PillowMeasurer.for_family(font_family)
        self.bold_measurer = PillowMeasurer.for_family(font_family, bold=True)
        self.builder = SceneBuilder(self.measurer, typography, font_family)
        self._emoji_font: Optional[ImageFont.FreeTypeFont] = None
        self._emoji_font_loaded = False

    def render(self, document: CoverDocument) -> Image.Image:
        return self.render_scene(self.builder.build(document))

    def generate_png(self, document: CoverDocument, scene: Optional[CoverScene] = None) -> bytes:
        """PNG bytes for the document, or for an already built scene."""
        image = self.render_scene(scene) if scene is not None else self.render(document)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def render_scene(self, scene: CoverScene) -> Image.Image:
        canvas = Image.new("RGBA", (scene.width, scene.height), scene.background)
        self._draw_pattern(canvas, scene)
        self._draw_title(canvas, scene)
        self._draw_body(canvas, scene)
        self._draw_tag(canvas, scene)
        for sticker in scene.stickers:
            self._draw_sticker(canvas, sticker)
        logger.debug(f"Rendered {scene.width}x{scene.height} cover with "
                     f"{len(scene.body.lines)} body lines")
        return canvas.convert("RGB")

    def _draw_pattern(self, canvas: Image.Image, scene: CoverScene) -> None:
        if scene.pattern not in ("lines", "grid"):
            return
        draw = ImageDraw.Draw(canvas, "RGBA")
        step = scene.pattern_step
        width = 6 if scene.pattern == "lines" else 3
        y = 0.0
        while y <= scene.height:
            draw.line([(0, y), (scene.width, y)], fill=PATTERN_COLOR, width=width)
            y += step
        if scene.pattern == "grid":
            x = 0.0
            while x <= scene.width:
                draw.line([(x, 0), (x, scene.height)], fill=PATTERN_COLOR, width=width)
                x += step

    def _draw_title(self, canvas: Image.Image, scene: CoverScene) -> None:
        title = scene.title
        if not title.text:
            return
        font = self.bold_measurer.font(title.font_px)
        mask = Image.new("L", canvas.size, 0)
        ImageDraw.Draw(mask).text((title.center_x, title.y), title.text, font=font,
                                  fill=255, anchor="ma")

        if scene.use_gradient:
            for color, blur in TITLE_GLOWS:
                canvas.alpha_composite(_shadow(mask, color, blur))
            fill = linear_gradient(canvas.size, even_stops(TITLE_GRADIENT),
                                   start=title.left, end=title.right)
        else:
            shadow = _shadow(mask, TITLE_SHADOW, 4)
            _composite(canvas, shadow, (2, 2))
            fill = Image.new("RGBA", canvas.size, parse_color(scene.theme.primary))
        fill.putalpha(ImageChops.multiply(fill.getchannel("A"), mask))
        canvas.alpha_composite(fill)

    def _draw_band(self, canvas: Image.Image, band: HighlightBandGeometry,
                   style: HighlightStyle) -> None:
        x0, y0 = int(round(band.x)), int(round(band.y))
        size = (max(1, int(round(band.width))), max(1, int(round(band.height))))
        mask = _pill_mask(size, band.corner_radius)

        glow = style.glow
        margin = int(glow.blur * 3)
        padded = Image.new("L", (size[0] + 2 * margin, size[1] + 2 * margin), 0)
        padded.paste(mask, (margin, margin))
        _composite(canvas, _shadow(padded, glow.color, glow.blur),
                   (x0 - margin, int(round(y0 - margin + glow.offset_y))))

        fill = linear_gradient(size, style.fill_stops)
        fill.putalpha(ImageChops.multiply(fill.getchannel("A"), mask))
        _composite(canvas, fill, (x0, y0))

        border = int(round(band.border_width))
        draw = ImageDraw.Draw(canvas, "RGBA")
        if style.bottom_border and size[0] > 2 * band.corner_radius:
            bottom = y0 + size[1] - border / 2
            draw.line([(x0 + band.corner_radius, bottom),
                       (x0 + size[0] - band.corner_radius, bottom)],
                      fill=style.bottom_border, width=border)
        if style.outline:
            draw.rounded_rectangle([x0, y0, x0 + size[0] - 1, y0 + size[1] - 1],
                                   radius=int(round(band.corner_radius)),
                                   outline=style.outline, width=border)

    def _draw_body(self, canvas: Image.Image, scene: CoverScene) -> None:
        metrics = scene.body.metrics
        font = self.measurer.font(metrics.font_px)
        style = scene.highlight_style
        primary = parse_color(scene.theme.primary)

        for line in scene.body.lines:
            for placed in line.tokens:
                if placed.band is not None:
                    self._draw_band(canvas, placed.band, style)
            draw = ImageDraw.Draw(canvas, "RGBA")
            for placed in line.tokens:
                if placed.token.is_space:
                    continue
                color = style.text_color if placed.token.is_highlight else primary
                draw.text((placed.text_x, line.text_y), placed.token.text, font=font,
                          fill=color, anchor="la")

    def _draw_tag(self, canvas: Image.Image, scene: CoverScene) -> None:
        tag = scene.tag
        x0, y0 = int(round(tag.x)), int(round(tag.y))
        size = (max(1, int(round(tag.width))), max(1, int(round(tag.height))))
        radius = size[1] / 2
        mask = _pill_mask(size, radius)

        margin = 25 * 3
        padded = Image.new("L", (size[0] + 2 * margin, size[1] + 2 * margin), 0)
        padded.paste(mask, (margin, margin))
        _composite(canvas, _shadow(padded, TAG_SHADOW, 25), (x0 - margin, y0 - margin))

        fill = linear_gradient(size, even_stops(tag.fill_stops))
        fill.putalpha(mask)
        _composite(canvas, fill, (x0, y0))

        sheen = Image.new("RGBA", size, (0, 0, 0, 0))
        ImageDraw.Draw(sheen).rounded_rectangle(
            [0, 0, size[0] - 1, max(1, size[1] // 3)], radius=int(radius), fill=TAG_SHEEN)
        _composite(canvas, sheen, (x0, y0))

        font = self.measurer.font(tag.font_px)
        ImageDraw.Draw(canvas, "RGBA").text((tag.center_x, tag.text_y), tag.text, font=font,
                                            fill=TAG_TEXT, anchor="ma")

    def emoji_font(self) -> Optional[ImageFont.FreeTypeFont]:
        """Color emoji font at its native strike, or None if there is none."""
        if not self._emoji_font_loaded:
            self._emoji_font_loaded = True
            for path in EMOJI_FONT_FILES:
                if not os.path.exists(path):
                    continue
                try:
                    self._emoji_font = ImageFont.truetype(path, EMOJI_NATIVE_PX)
                    break
                except OSError as e:
                    logger.debug(f"Could not load emoji font {path}: {e}")
            if self._emoji_font is None:
                logger.debug("No emoji font found, stickers use the body font")
        return self._emoji_font

    def sticker_tile(self, symbol: str, size: int, rotation: float = 0.0) -> Image.Image:
        """A sticker glyph scaled to `size` and rotated clockwise by `rotation` degrees."""
        font = self.emoji_font() or self.measurer.font(size)
        left, top, right, bottom = font.getbbox(symbol)
        tile = Image.new("RGBA", (max(1, int(right)), max(1, int(bottom))), (0, 0, 0, 0))
        ImageDraw.Draw(tile).text((0, 0), symbol, font=font, fill=(0, 0, 0, 255),
                                  embedded_color=True)
        if tile.size != (size, size):
            tile = tile.resize((size, size), Image.Resampling.LANCZOS)
        if rotation:
            tile = tile.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)
        return tile

    def _draw_sticker(self, canvas: Image.Image, sticker: StickerBox) -> None:
        size = max(1, int(round(sticker.size)))
        tile = self.sticker_tile(sticker.symbol, size, sticker.rotation)
        cx, cy = sticker.center
        _composite(canvas, tile, (int(round(cx - tile.width / 2)),
                                  int(round(cy - tile.height / 2))))
