"""Tests for export/preview geometry."""

import pytest

from covermark.layout import LayoutConfigError
from covermark.measure import FixedAdvanceMeasurer
from covermark.resolution import (
    BodyTypography,
    Resolution,
    ResolutionAdapter,
)

BODY = "buy the best deal today\nthe best thing about the best deal is the price"


@pytest.fixture
def adapter():
    return ResolutionAdapter(FixedAdvanceMeasurer())


def test_scale_and_frame(adapter):
    assert adapter.scale == pytest.approx(1 / 3)
    assert adapter.max_width == 900


def test_non_uniform_preview_is_rejected():
    with pytest.raises(LayoutConfigError):
        ResolutionAdapter(FixedAdvanceMeasurer(), preview=Resolution("preview", 360, 400))


def test_font_size_clamping(adapter):
    assert adapter.export_font_px(52) == 182
    assert adapter.export_font_px(None) == 182
    assert adapter.export_font_px(10) == 112
    assert adapter.export_font_px(200) == 280


def test_metrics(adapter):
    export = adapter.export_metrics(182)
    assert export.line_height == 273
    assert export.highlight_pad == 27
    assert (export.frame_left, export.frame_top, export.frame_width) == (90, 420, 900)

    preview = adapter.preview_metrics(182)
    assert preview.font_px == 61
    assert preview.line_height == pytest.approx(91)
    assert preview.highlight_pad == pytest.approx(9)
    assert preview.frame_width == pytest.approx(300)


def test_preview_font_floor_is_visual_only():
    typography = BodyTypography(min_font_size=1, min_export_font_px=1)
    adapter = ResolutionAdapter(FixedAdvanceMeasurer(), typography)
    assert adapter.export_font_px(10) == 35
    result = adapter.layout("tiny text", "", 10)
    assert result.font_pixel_size == 35

    preview = adapter.place_preview(result)
    assert preview.metrics.font_px == 14
    export = adapter.place_export(result)
    assert preview.lines[0].width == pytest.approx(export.lines[0].width / 3)


def test_layout_runs_at_export_resolution(adapter):
    result = adapter.layout(BODY, "best", 52)
    assert result.max_width == 900
    assert result.font_pixel_size == 182


def test_preview_has_same_line_breaks(adapter):
    for size in (32, 40, 52, 66, 80):
        result = adapter.layout(BODY, "best", size)
        export = adapter.place_export(result)
        preview = adapter.place_preview(result)
        assert preview.line_breaks() == export.line_breaks() == result.line_breaks()


def test_preview_coordinates_are_scaled_export(adapter):
    result = adapter.layout(BODY, "best", 52)
    export = adapter.place_export(result)
    preview = adapter.place_preview(result)
    assert preview.resolution.width == 360
    for e_line, p_line in zip(export.lines, preview.lines):
        assert p_line.x == pytest.approx(e_line.x / 3)
        assert p_line.y == pytest.approx(e_line.y / 3)
        assert p_line.height == pytest.approx(e_line.height / 3)
        for e_token, p_token in zip(e_line.tokens, p_line.tokens):
            assert p_token.x == pytest.approx(e_token.x / 3)
            assert p_token.width == pytest.approx(e_token.width / 3)
            if e_token.band is not None:
                assert p_token.band.width == pytest.approx(e_token.band.width / 3)
                assert p_token.band.y == pytest.approx(e_token.band.y / 3)


def test_export_placement(adapter):
    result = adapter.layout("hello\nworld", "", 52)
    export = adapter.place_export(result)
    first, second = export.lines
    # 5 characters at 0.6 x 182 = 546px, centred in the 900px frame
    assert first.width == pytest.approx(546)
    assert first.x == 90 + 177
    assert first.y == 420
    assert first.text_y == pytest.approx(420 + (273 - 182) / 2)
    # One line height plus half a line height of paragraph gap
    assert second.y == 420 + 273 + 137


def test_highlight_bands_are_placed(adapter):
    result = adapter.layout("best", "best", 52)
    export = adapter.place_export(result)
    token = export.lines[0].tokens[0]
    assert token.band is not None
    assert token.band.x == token.x
    assert token.text_x == token.x + 27
    assert token.band.width == pytest.approx(token.width)
    assert token.band.height == 146
    assert token.band.y == 420 + 64


def test_plain_tokens_have_no_band(adapter):
    export = adapter.place_export(adapter.layout("plain words", "", 52))
    assert all(t.band is None for t in export.lines[0].tokens)


def test_empty_body(adapter):
    result = adapter.layout("", "best", 52)
    assert result.lines == []
    assert adapter.place_preview(result).lines == ()


def test_pad_ratio_applies_to_both_resolutions():
    adapter = ResolutionAdapter(FixedAdvanceMeasurer(), BodyTypography(pad_ratio=0.08))
    result = adapter.layout("best", "best", 80)
    export = adapter.place_export(result)
    preview = adapter.place_preview(result)
    # 280px font: pad = max(24, round(22.4)) = 24
    assert export.metrics.highlight_pad == 24
    assert preview.lines[0].tokens[0].text_x - preview.lines[0].tokens[0].x == pytest.approx(8)
