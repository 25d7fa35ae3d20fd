"""The cover being composed: text, theme, background and stickers."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .constants import CoverConstants
from .theme import DEFAULT_BACKGROUND, DEFAULT_THEME, THEMES, Template, get_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextContent:
    title: str = "点击编辑主标题"
    highlight: str = "高亮关键词"
    body: str = "在这里输入正文内容，包含高亮关键词的部分会自动高亮显示..."
    tag: str = "好物分享"

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "highlight": self.highlight,
                "body": self.body, "tag": self.tag}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextContent":
        defaults = cls()
        values = {}
        for key in ("title", "highlight", "body", "tag"):
            value = data.get(key)
            values[key] = value if isinstance(value, str) else getattr(defaults, key)
        return cls(**values)


def clamp_sticker_scale(scale: float) -> float:
    return max(CoverConstants.STICKER_MIN_SCALE, min(CoverConstants.STICKER_MAX_SCALE, scale))


@dataclass(frozen=True)
class Sticker:
    """An emoji placed on the cover, in preview coordinates.

    (x, y) is where the glyph box starts; rotation is in degrees,
    clockwise, about the centre of the glyph box.
    """
    id: int
    symbol: str
    name: str = "emoji"
    x: float = CoverConstants.PREVIEW_WIDTH / 2
    y: float = CoverConstants.PREVIEW_HEIGHT / 2
    scale: float = 1.0
    rotation: float = 0.0

    def preview_size(self) -> float:
        return CoverConstants.STICKER_PREVIEW_PX * self.scale

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "symbol": self.symbol,
                "x": self.x, "y": self.y, "scale": self.scale, "rotation": self.rotation}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sticker":
        """Build a sticker from saved data.

        Raises:
            ValueError: If id or symbol is missing or a number is malformed.
        """
        if "id" not in data or not isinstance(data.get("symbol"), str):
            raise ValueError(f"Sticker needs an id and a symbol: {data!r}")
        try:
            return cls(
                id=int(data["id"]),
                symbol=data["symbol"],
                name=str(data.get("name") or "emoji"),
                x=float(data.get("x", CoverConstants.PREVIEW_WIDTH / 2)),
                y=float(data.get("y", CoverConstants.PREVIEW_HEIGHT / 2)),
                scale=clamp_sticker_scale(float(data.get("scale", 1.0))),
                rotation=float(data.get("rotation", 0.0)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Malformed sticker {data!r}: {e}")


def clamp_body_font_size(size: float) -> float:
    return max(CoverConstants.BODY_FONT_SIZE_MIN, min(CoverConstants.BODY_FONT_SIZE_MAX, size))


@dataclass
class CoverDocument:
    """Everything the user edits. Both renderings are derived from it."""
    template: Optional[Template] = None
    text: TextContent = field(default_factory=TextContent)
    theme: str = DEFAULT_THEME
    background_color: str = DEFAULT_BACKGROUND
    body_font_size: float = CoverConstants.DEFAULT_BODY_FONT_SIZE
    use_gradient: bool = False
    stickers: List[Sticker] = field(default_factory=list)
    selected_sticker_id: Optional[int] = None

    @property
    def pattern(self) -> str:
        if self.template is not None and self.template.theme == "notebook":
            return self.template.pattern
        return "blank"

    def set_text(self, **changes: str) -> None:
        self.text = replace(self.text, **changes)

    def set_body_font_size(self, size: float) -> None:
        self.body_font_size = clamp_body_font_size(size)

    def select_template(self, template: Template) -> None:
        """Apply a template's theme and background. Text is kept."""
        self.template = template
        self.theme = template.theme or DEFAULT_THEME
        self.background_color = template.background_color or DEFAULT_BACKGROUND

    def get_sticker(self, sticker_id: int) -> Optional[Sticker]:
        for sticker in self.stickers:
            if sticker.id == sticker_id:
                return sticker
        return None

    def add_sticker(self, symbol: str, name: str = "emoji") -> Sticker:
        """Add a sticker at the centre of the preview and select it."""
        next_id = max((s.id for s in self.stickers), default=0) + 1
        sticker = Sticker(id=next_id, symbol=symbol, name=name)
        self.stickers.append(sticker)
        self.selected_sticker_id = sticker.id
        return sticker

    def update_sticker(self, sticker_id: int, **updates: Any) -> Optional[Sticker]:
        """Merge updates into a sticker. Unknown ids are ignored."""
        if "scale" in updates:
            updates["scale"] = clamp_sticker_scale(updates["scale"])
        for index, sticker in enumerate(self.stickers):
            if sticker.id == sticker_id:
                self.stickers[index] = replace(sticker, **updates)
                return self.stickers[index]
        return None

    def delete_sticker(self, sticker_id: int) -> None:
        self.stickers = [s for s in self.stickers if s.id != sticker_id]
        if self.selected_sticker_id == sticker_id:
            self.selected_sticker_id = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selectedTemplate": self.template.id if self.template else None,
            "textContent": self.text.to_dict(),
            "colorTheme": self.theme,
            "backgroundColor": self.background_color,
            "emojis": [sticker.to_dict() for sticker in self.stickers],
            "bodyFontSize": self.body_font_size,
            "selectedEmojiId": self.selected_sticker_id,
            "useGradientText": self.use_gradient,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoverDocument":
        """Restore a document, keeping defaults for anything missing or malformed."""
        document = cls()

        template_ref = data.get("selectedTemplate")
        if isinstance(template_ref, dict):
            template_ref = template_ref.get("id")
        if isinstance(template_ref, int):
            document.template = get_template(template_ref)

        if isinstance(data.get("textContent"), dict):
            document.text = TextContent.from_dict(data["textContent"])
        theme = data.get("colorTheme")
        if isinstance(theme, str) and theme in THEMES:
            document.theme = theme
        if isinstance(data.get("backgroundColor"), str) and data["backgroundColor"]:
            document.background_color = data["backgroundColor"]
        size = data.get("bodyFontSize")
        if isinstance(size, (int, float)) and not isinstance(size, bool):
            document.body_font_size = clamp_body_font_size(size)
        if isinstance(data.get("useGradientText"), bool):
            document.use_gradient = data["useGradientText"]

        if isinstance(data.get("emojis"), list):
            for item in data["emojis"]:
                if not isinstance(item, dict):
                    continue
                try:
                    document.stickers.append(Sticker.from_dict(item))
                except ValueError as e:
                    logger.warning(f"Skipping sticker: {e}")

        selected = data.get("selectedEmojiId")
        if selected is not None and document.get_sticker(selected) is not None:
            document.selected_sticker_id = selected
        return document
