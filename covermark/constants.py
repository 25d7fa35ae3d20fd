"""Constants and configuration for the covermark renderer."""

class CoverConstants:
    """Central configuration constants for cover composition."""

    # Canvas sizes (3:4 note cover)
    EXPORT_WIDTH = 1080
    EXPORT_HEIGHT = 1440
    PREVIEW_WIDTH = 360
    PREVIEW_HEIGHT = 480

    # Body text area at export resolution
    BODY_MARGIN_X = 90  # Left and right margin of the body frame
    BODY_TOP = 420  # Top of the first body line

    # Body font sizing
    BODY_FONT_SIZE_MIN = 32  # Range offered by the editor slider
    BODY_FONT_SIZE_MAX = 80
    DEFAULT_BODY_FONT_SIZE = 52
    BODY_FONT_SCALE = 3.5  # Editor size -> export pixels
    MIN_EXPORT_FONT_PX = 40
    MIN_PREVIEW_FONT_PX = 14  # Legibility floor, visual only
    LINE_HEIGHT_RATIO = 1.5
    PARAGRAPH_GAP_RATIO = 0.5  # Fraction of a line height between paragraphs

    # Highlight band proportions (fractions of the export font size)
    HIGHLIGHT_PAD_RATIO = 0.15
    MIN_HIGHLIGHT_PAD = 24  # Export pixels
    BAND_HEIGHT_RATIO = 0.8
    BAND_BORDER_RATIO = 0.035
    MIN_BAND_BORDER = 2

    # Measurement fallback
    AVERAGE_CHAR_WIDTH = 0.6  # Em fraction for an unknown glyph
    WIDE_CHAR_WIDTH = 1.0  # Em fraction for East Asian wide glyphs

    # Title
    TITLE_FONT_PX = 120
    TITLE_TOP = 180

    # Hashtag pill
    TAG_FONT_PX = 48
    TAG_PAD_X = 72
    TAG_PAD_Y = 36
    TAG_LEFT = 90
    TAG_BOTTOM = 180  # Distance from the bottom edge to the pill

    # Stickers
    STICKER_BASE_PX = 108  # Export size at scale 1
    STICKER_MIN_PX = 24
    STICKER_PREVIEW_PX = 32  # Preview size at scale 1
    STICKER_MIN_SCALE = 0.3
    STICKER_MAX_SCALE = 3.0

    # Notebook background pattern
    NOTEBOOK_STEP = 84  # 28px preview step at 3x
    NOTEBOOK_LINE_WIDTH = 6
    NOTEBOOK_GRID_WIDTH = 3

    # Draft persistence
    DRAFT_SCHEMA_KEY = "xhs_cover_state_v1"
