"""Font configuration for cover rendering.

This module maps a font family, as named in a layout request, to the
reportlab font names used for metric measurement and PDF output and to
the TrueType files the raster exporter draws with.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


# CJK-capable faces. TrueType-outline files come first: reportlab cannot
# embed the CFF outlines of the Noto CJK collections, Pillow can.
_CJK_FILES = (
    "/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc",
    "/usr/share/fonts/wqy-zenhei/wqy-zenhei.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "/usr/share/fonts/truetype/droid/DroidSansFallbackFull.ttf",
    "/usr/share/fonts/truetype/arphic/uming.ttc",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "C:/Windows/Fonts/msyh.ttc",
    "C:/Windows/Fonts/simhei.ttf",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/System/Library/Fonts/Hiragino Sans GB.ttc",
    "/System/Library/Fonts/PingFang.ttc",
)

_CJK_BOLD_FILES = (
    "/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc",
    "/usr/share/fonts/wqy-zenhei/wqy-zenhei.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "C:/Windows/Fonts/msyhbd.ttc",
    "C:/Windows/Fonts/simhei.ttf",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/truetype/noto/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/google-noto-cjk/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Bold.ttc",
    "/System/Library/Fonts/Hiragino Sans GB.ttc",
    "/System/Library/Fonts/PingFang.ttc",
)

# Raster faces for the standard family, CJK first and Latin-only last
_SANS_FILES = _CJK_FILES + (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
)

_SANS_BOLD_FILES = _CJK_BOLD_FILES + (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
)

EMOJI_FONT_FILES = (
    "/usr/share/fonts/truetype/noto/NotoColorEmoji.ttf",
    "/usr/share/fonts/noto/NotoColorEmoji.ttf",
    "/System/Library/Fonts/Apple Color Emoji.ttc",
    "C:/Windows/Fonts/seguiemj.ttf",
)

# Color bitmap emoji fonts only load at their native strike size
EMOJI_NATIVE_PX = 109


@dataclass(frozen=True)
class FontConfig:
    """Configuration for one font family.

    Attributes:
        name: Family name used in layout requests
        pdf_name: reportlab font name for measurement and PDF text
        pdf_bold_name: Bold variant name for PDF
        font_files: Candidate TrueType files for the regular weight
        bold_font_files: Candidate TrueType files for the bold weight
        is_embedded: Whether the font must be registered from a file
            (vs one of the standard PDF fonts)
    """
    name: str
    pdf_name: str
    pdf_bold_name: str
    font_files: Tuple[str, ...] = ()
    bold_font_files: Tuple[str, ...] = ()
    is_embedded: bool = False

    def existing_font_files(self, bold: bool = False) -> List[str]:
        """Return every candidate file present on this system, in order."""
        candidates = self.bold_font_files if bold else self.font_files
        found = []
        for path in candidates:
            expanded = os.path.expanduser(path)
            if os.path.exists(expanded) and expanded not in found:
                found.append(expanded)
        return found

    def find_font_file(self, bold: bool = False) -> Optional[str]:
        """Return the first candidate file that exists, or None."""
        found = self.existing_font_files(bold=bold)
        return found[0] if found else None


FONT_CONFIGS: Dict[str, FontConfig] = {
    "Helvetica": FontConfig(
        name="Helvetica",
        pdf_name="Helvetica",
        pdf_bold_name="Helvetica-Bold",
        font_files=_SANS_FILES,
        bold_font_files=_SANS_BOLD_FILES,
        is_embedded=False,  # Standard PDF font, metrics ship with reportlab
    ),
    "Noto Sans CJK": FontConfig(
        name="Noto Sans CJK",
        pdf_name="NotoSansCJK",
        pdf_bold_name="NotoSansCJK-Bold",
        font_files=_CJK_FILES,
        bold_font_files=_CJK_BOLD_FILES,
        is_embedded=True,
    ),
}

DEFAULT_FONT_FAMILY = "Helvetica"
CJK_FONT_FAMILY = "Noto Sans CJK"


def get_font_config(font_name: str) -> Optional[FontConfig]:
    """Get font configuration by family name.

    Args:
        font_name: Name of the font family

    Returns:
        FontConfig if found, None otherwise
    """
    return FONT_CONFIGS.get(font_name)
