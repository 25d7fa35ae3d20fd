"""HTML markup for the on-screen preview.

Every coordinate comes from a preview CoverScene, i.e. the export
placement multiplied by the preview ratio. The markup never wraps text
itself: each line is absolutely positioned and set with white-space: pre.
"""

import html
from typing import List

from .highlight import HighlightStyle
from .resolution import PlacedLine
from .scene import TITLE_GRADIENT, CoverScene
from .theme import css_color, parse_color

FONT_STACK = "system-ui, -apple-system, 'Segoe UI', Roboto, 'Noto Sans', Arial, sans-serif"
EMOJI_STACK = "'Segoe UI Emoji', 'Apple Color Emoji', 'Noto Color Emoji', sans-serif"


def _px(value: float) -> str:
    return f"{round(value, 2):g}px"


def _gradient(stops) -> str:
    parts = ", ".join(f"{css_color(color)} {round(offset * 100):d}%" for offset, color in stops)
    return f"linear-gradient(90deg, {parts})"


def _even(colors) -> List:
    last = max(1, len(colors) - 1)
    return [(i / last, parse_color(c)) for i, c in enumerate(colors)]


class PreviewRenderer:
    """Renders a preview scene to a self-contained HTML fragment."""

    def render(self, scene: CoverScene) -> str:
        parts = [
            f'<div class="cover-preview" style="position:relative;overflow:hidden;'
            f'width:{_px(scene.width)};height:{_px(scene.height)};'
            f'background:{css_color(scene.background)};{self._pattern(scene)}'
            f'font-family:{FONT_STACK}">'
        ]
        parts.append(self._title(scene))
        for index, line in enumerate(scene.body.lines):
            parts.append(self._line(scene, index, line))
        parts.append(self._tag(scene))
        for sticker in scene.stickers:
            parts.append(
                f'<span class="sticker" style="position:absolute;left:{_px(sticker.x)};'
                f'top:{_px(sticker.y)};width:{_px(sticker.size)};height:{_px(sticker.size)};'
                f'font-size:{_px(sticker.size)};line-height:1;font-family:{EMOJI_STACK};'
                f'transform:rotate({sticker.rotation:g}deg);transform-origin:center">'
                f'{html.escape(sticker.symbol)}</span>'
            )
        parts.append("</div>")
        return "\n".join(parts)

    def _pattern(self, scene: CoverScene) -> str:
        if scene.pattern not in ("lines", "grid"):
            return ""
        step = _px(scene.pattern_step)
        ink = "rgba(0,0,0,0.036)"
        if scene.pattern == "lines":
            return (f"background-image:repeating-linear-gradient(0deg, {ink} 0 2px, "
                    f"transparent 2px {step});")
        return (f"background-image:linear-gradient({ink} 1px, transparent 1px), "
                f"linear-gradient(90deg, {ink} 1px, transparent 1px);"
                f"background-size:{step} {step};")

    def _title(self, scene: CoverScene) -> str:
        title = scene.title
        if scene.use_gradient:
            paint = (f"background:{_gradient(_even(TITLE_GRADIENT))};"
                     "-webkit-background-clip:text;background-clip:text;color:transparent;"
                     "filter:drop-shadow(0 0 7px rgba(168,85,247,0.4))")
        else:
            paint = (f"color:{scene.theme.primary};"
                     "text-shadow:1px 1px 1px rgba(0,0,0,0.1)")
        return (
            f'<div class="title" style="position:absolute;left:{_px(title.left)};'
            f'top:{_px(title.y)};width:{_px(title.right - title.left)};text-align:center;'
            f'white-space:nowrap;font-weight:bold;font-size:{_px(title.font_px)};'
            f'line-height:1.2;{paint}">{html.escape(title.text)}</div>'
        )

    def _line(self, scene: CoverScene, index: int, line: PlacedLine) -> str:
        metrics = scene.body.metrics
        spans = []
        for placed in line.tokens:
            left = placed.x - line.x
            text = html.escape(placed.token.text)
            if placed.band is None:
                spans.append(
                    f'<span style="position:absolute;left:{_px(left)};top:0;'
                    f'width:{_px(placed.width)}">{text}</span>'
                )
                continue
            band = placed.band
            spans.append(
                f'<span class="highlight" style="position:absolute;left:{_px(left)};'
                f'top:{_px(band.y - line.y)};width:{_px(band.width)};height:{_px(band.height)};'
                f'line-height:{_px(band.height)};box-sizing:border-box;'
                f'padding-left:{_px(placed.text_x - placed.x)};'
                f'border-radius:{_px(band.corner_radius)};'
                f'{self._band_paint(scene.highlight_style, band.border_width)}">{text}</span>'
            )
        return (
            f'<div class="line" data-line="{index}" style="position:absolute;'
            f'left:{_px(line.x)};top:{_px(line.y)};width:{_px(line.width)};'
            f'height:{_px(line.height)};line-height:{_px(line.height)};'
            f'font-size:{_px(metrics.font_px)};white-space:pre;'
            f'color:{scene.theme.primary}">{"".join(spans)}</div>'
        )

    def _band_paint(self, style: HighlightStyle, border_width: float) -> str:
        glow = style.glow
        paint = [
            f"background:{_gradient(style.fill_stops)}",
            f"color:{css_color(style.text_color)}",
            f"box-shadow:0 {_px(glow.offset_y / 3)} {_px(glow.blur / 3)} {css_color(glow.color)}",
        ]
        if style.outline:
            paint.append(f"outline:{_px(max(1.0, border_width / 2))} solid {css_color(style.outline)}")
        if style.bottom_border:
            paint.append(f"border-bottom:{_px(border_width)} solid {css_color(style.bottom_border)}")
        return ";".join(paint)

    def _tag(self, scene: CoverScene) -> str:
        tag = scene.tag
        start, end = tag.fill_stops
        return (
            f'<div class="tag" style="position:absolute;left:{_px(tag.x)};top:{_px(tag.y)};'
            f'width:{_px(tag.width)};height:{_px(tag.height)};'
            f'border-radius:{_px(tag.height / 2)};'
            f'background:linear-gradient(135deg, {start} 0%, {end} 100%);'
            f'box-shadow:0 0 {_px(tag.height / 5)} rgba(0,0,0,0.2);color:#FFFFFF;'
            f'text-align:center;white-space:nowrap;font-weight:500;'
            f'font-size:{_px(tag.font_px)};line-height:{_px(tag.height)}">'
            f'{html.escape(tag.text)}</div>'
        )

    def render_page(self, scene: CoverScene, title: str = "Cover preview") -> str:
        """A complete HTML document around `render`."""
        return (
            "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{html.escape(title)}</title>\n</head>\n<body>\n"
            f"{self.render(scene)}\n</body>\n</html>\n"
        )
