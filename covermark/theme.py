"""Color themes, notebook templates and color parsing."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

RGBA = Tuple[int, int, int, int]

DEFAULT_THEME = "morandi"
DEFAULT_BACKGROUND = "#F8F5F2"


@dataclass(frozen=True)
class ColorTheme:
    """Three colors that drive a cover.

    Attributes:
        id: Theme identifier stored in drafts
        name: Display name
        primary: Title and body text
        secondary: Start of the hashtag pill gradient
        accent: End of the hashtag pill gradient
    """
    id: str
    name: str
    primary: str
    secondary: str
    accent: str


THEMES: Dict[str, ColorTheme] = {
    theme.id: theme for theme in (
        ColorTheme("morandi", "莫兰迪", "#8B7355", "#A89F91", "#D4A574"),
        ColorTheme("orange", "活力橙", "#FF6B35", "#FF8C42", "#FFB347"),
        ColorTheme("instagram", "Ins风", "#E1306C", "#F77737", "#FFDC80"),
        ColorTheme("green", "清新绿", "#4CAF50", "#8BC34A", "#CDDC39"),
        ColorTheme("pink", "温柔粉", "#FF69B4", "#FFB6C1", "#FFC0CB"),
        ColorTheme("gray", "高级灰", "#696969", "#808080", "#A9A9A9"),
        ColorTheme("notebook", "笔记本", "#2C3E50", "#34495E", "#7F8C8D"),
    )
}


def get_theme(theme_id: Optional[str]) -> ColorTheme:
    """Theme by id; unknown ids get the default theme."""
    return THEMES.get(theme_id or DEFAULT_THEME, THEMES[DEFAULT_THEME])


@dataclass(frozen=True)
class Template:
    id: int
    name: str
    theme: str
    pattern: str  # "blank", "lines" or "grid"
    background_color: str
    default_text: Dict[str, str] = field(default_factory=dict)


TEMPLATES: Dict[int, Template] = {
    template.id: template for template in (
        Template(7, "空白笔记本", "notebook", "blank", "#FDFDFD",
                 {"title": "空白页", "highlight": "开始记录", "tag": "笔记本"}),
        Template(8, "横线笔记本", "notebook", "lines", "#FDFDFD",
                 {"title": "横线本", "highlight": "整齐记录", "tag": "笔记本"}),
        Template(9, "网格笔记本", "notebook", "grid", "#FDFDFD",
                 {"title": "网格本", "highlight": "精准记录", "tag": "笔记本"}),
    )
}


def get_template(template_id: Optional[int]) -> Optional[Template]:
    if template_id is None:
        return None
    return TEMPLATES.get(template_id)


def parse_color(value: str, alpha: int = 255) -> RGBA:
    """Parse `#RGB`, `#RRGGBB` or `#RRGGBBAA` into an RGBA tuple.

    Raises:
        ValueError: If the value is not a hex color.
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid color: {value!r}")
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) not in (6, 8):
        raise ValueError(f"Invalid color: {value!r}")
    try:
        channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    except ValueError:
        raise ValueError(f"Invalid color: {value!r}")
    if len(channels) == 3:
        channels.append(alpha)
    return tuple(channels)  # type: ignore[return-value]


def css_color(color: RGBA) -> str:
    """RGBA tuple as a CSS color."""
    r, g, b, a = color
    if a == 255:
        return f"#{r:02X}{g:02X}{b:02X}"
    return f"rgba({r},{g},{b},{round(a / 255, 2)})"


def to_unit_rgb(color: RGBA) -> Tuple[float, float, float, float]:
    """RGBA tuple with 0..1 channels, as reportlab colors expect."""
    return tuple(channel / 255 for channel in color)  # type: ignore[return-value]
