"""Tests for text measurers."""

from unittest.mock import MagicMock, patch

import pytest
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError

from covermark.font_config import FontConfig
from covermark.layout import LayoutConfig, LayoutEngine
from covermark.measure import (
    FixedAdvanceMeasurer,
    FontLoadError,
    FontMetricsMeasurer,
    MeasurementError,
    PillowMeasurer,
    TextMeasurer,
    estimate_width,
    measure_with_fallback,
    preferred_font_family,
    register_pdf_font,
)


def test_estimate_width_counts_wide_characters_as_one_em():
    assert estimate_width("abc", 40) == pytest.approx(72)
    assert estimate_width("中文", 40) == pytest.approx(80)
    assert estimate_width("a中", 10, average_char_width=0.5) == pytest.approx(15)


def test_fixed_advance_measurer():
    measurer = FixedAdvanceMeasurer()
    assert measurer.measure("hello", 40, "any") == pytest.approx(120)
    assert FixedAdvanceMeasurer(0.5).measure("ab", 10, "any") == pytest.approx(10)


def test_font_metrics_measurer_matches_reportlab():
    measurer = FontMetricsMeasurer()
    width = measurer.measure("Hello", 40, "Helvetica")
    assert width == pytest.approx(pdfmetrics.stringWidth("Hello", "Helvetica", 40))
    assert measurer.measure("iiii", 40, "Helvetica") < measurer.measure("WWWW", 40, "Helvetica")


def test_font_metrics_measurer_scales_with_size():
    measurer = FontMetricsMeasurer()
    assert measurer.measure("cover", 80, "Helvetica") == pytest.approx(
        2 * measurer.measure("cover", 40, "Helvetica"))


def test_font_metrics_measurer_rejects_text_outside_cp1252():
    with pytest.raises(MeasurementError):
        FontMetricsMeasurer().measure("你好", 40, "Helvetica")


def test_unknown_family_uses_default():
    measurer = FontMetricsMeasurer()
    assert measurer.measure("abc", 40, "No Such Font") == pytest.approx(
        measurer.measure("abc", 40, "Helvetica"))


def test_missing_embedded_font_raises():
    config = FontConfig(name="Ghost", pdf_name="GhostFont", pdf_bold_name="GhostFont-Bold",
                        font_files=("/nonexistent/ghost.ttf",), is_embedded=True)
    with pytest.raises(FontLoadError):
        register_pdf_font(config)
    with pytest.raises(FontLoadError):
        register_pdf_font(config, bold=True)


def test_standard_font_needs_no_registration():
    config = FontConfig(name="Helvetica", pdf_name="Helvetica", pdf_bold_name="Helvetica-Bold")
    assert register_pdf_font(config) == "Helvetica"
    assert register_pdf_font(config, bold=True) == "Helvetica-Bold"


def test_pillow_measurer_default_font():
    measurer = PillowMeasurer()
    short = measurer.measure("ab", 40, "any")
    long = measurer.measure("abababab", 40, "any")
    assert short > 0
    assert long > short
    assert measurer.font(40) is measurer.font(40)


def test_pillow_measurer_bad_font_file():
    measurer = PillowMeasurer("/nonexistent/font.ttf")
    with pytest.raises(MeasurementError):
        measurer.measure("abc", 40, "any")


def test_measure_with_fallback():
    class AsciiOnly(TextMeasurer):
        def measure(self, text, font_px, font_family):
            if not text.isascii():
                raise MeasurementError(text)
            return 0.6 * font_px * len(text)

    assert measure_with_fallback(AsciiOnly(), "#tag", 48, "any") == pytest.approx(4 * 28.8)
    assert measure_with_fallback(AsciiOnly(), "#好物", 48, "any") == pytest.approx(28.8 + 96)


def test_measure_with_fallback_survives_any_measurer_error():
    class Broken(TextMeasurer):
        def measure(self, text, font_px, font_family):
            raise RuntimeError("surface gone")

    assert measure_with_fallback(Broken(), "ab", 10, "any") == pytest.approx(12)


def test_measure_with_fallback_fills_cache():
    cache = {}
    width = measure_with_fallback(FixedAdvanceMeasurer(), "abc", 10, "any", cache=cache)
    assert cache == {"abc": width}
    cache["abc"] = 99.0
    assert measure_with_fallback(FixedAdvanceMeasurer(), "abc", 10, "any", cache=cache) == 99.0


@pytest.fixture
def unparseable_font(tmp_path):
    path = tmp_path / "broken.ttf"
    path.write_bytes(b"not a font")
    return FontConfig(name="Broken Sans", pdf_name="CovermarkBrokenSans",
                      pdf_bold_name="CovermarkBrokenSans-Bold",
                      font_files=(str(path),), is_embedded=True)


def test_unparseable_font_raises_font_load_error(unparseable_font):
    with pytest.raises(FontLoadError):
        register_pdf_font(unparseable_font)


def test_failed_registration_is_not_retried(unparseable_font):
    measurer = FontMetricsMeasurer()
    engine = LayoutEngine(measurer)
    config = LayoutConfig("the quick brown fox jumps " * 4, "", 300, 40,
                          font_family="Broken Sans")
    with patch("covermark.measure.get_font_config", return_value=unparseable_font), \
            patch("covermark.measure.TTFont", side_effect=TTFError("bad font")) as ttfont:
        result = engine.layout(config)
        with pytest.raises(MeasurementError):
            measurer.measure("abc", 40, "Broken Sans")
    assert ttfont.call_count == 1
    assert result.lines


def test_registration_skips_files_reportlab_cannot_parse(tmp_path):
    cff = tmp_path / "cff.ttc"
    truetype = tmp_path / "truetype.ttc"
    cff.write_bytes(b"")
    truetype.write_bytes(b"")
    config = FontConfig(name="Skip Sans", pdf_name="CovermarkSkipSans",
                        pdf_bold_name="CovermarkSkipSans-Bold",
                        font_files=(str(cff), str(truetype)), is_embedded=True)
    font = MagicMock()
    with patch("covermark.measure.TTFont",
               side_effect=[TTFError("postscript outlines are not supported"), font]) as ttfont, \
            patch("covermark.measure.pdfmetrics.registerFont") as register:
        assert register_pdf_font(config) == "CovermarkSkipSans"
    assert ttfont.call_args_list[-1].args == ("CovermarkSkipSans", str(truetype))
    register.assert_called_once_with(font)


def test_unparseable_bold_falls_back_to_regular(tmp_path):
    regular = tmp_path / "regular.ttf"
    bold = tmp_path / "bold.ttc"
    regular.write_bytes(b"")
    bold.write_bytes(b"")
    config = FontConfig(name="Bold Fallback", pdf_name="CovermarkFallback",
                        pdf_bold_name="CovermarkFallback-Bold",
                        font_files=(str(regular),), bold_font_files=(str(bold),),
                        is_embedded=True)
    with patch("covermark.measure.TTFont",
               side_effect=[TTFError("postscript outlines are not supported"), MagicMock()]), \
            patch("covermark.measure.pdfmetrics.registerFont"):
        assert register_pdf_font(config, bold=True) == "CovermarkFallback"


def test_preferred_font_family():
    with patch("covermark.measure.register_pdf_font", return_value="NotoSansCJK"):
        assert preferred_font_family() == "Noto Sans CJK"
    with patch("covermark.measure.register_pdf_font", side_effect=FontLoadError("none")):
        assert preferred_font_family() == "Helvetica"
