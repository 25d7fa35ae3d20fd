"""Covermark - text layout and highlight rendering for note covers."""

from .composition import CoverDocument, Sticker, TextContent
from .highlight import HighlightBandGeometry, compute_band
from .layout import (
    LayoutConfig,
    LayoutConfigError,
    LayoutEngine,
    LayoutResult,
    Line,
    ParagraphGap,
    layout_text,
)
from .measure import (
    FixedAdvanceMeasurer,
    FontMetricsMeasurer,
    MeasurementError,
    PillowMeasurer,
    TextMeasurer,
)
from .resolution import ResolutionAdapter
from .scene import CoverScene, SceneBuilder
from .tokenizer import Token, tokenize

__all__ = [
    'CoverDocument',
    'CoverScene',
    'FixedAdvanceMeasurer',
    'FontMetricsMeasurer',
    'HighlightBandGeometry',
    'LayoutConfig',
    'LayoutConfigError',
    'LayoutEngine',
    'LayoutResult',
    'Line',
    'MeasurementError',
    'ParagraphGap',
    'PillowMeasurer',
    'ResolutionAdapter',
    'SceneBuilder',
    'Sticker',
    'TextContent',
    'TextMeasurer',
    'Token',
    'compute_band',
    'layout_text',
    'tokenize',
]
