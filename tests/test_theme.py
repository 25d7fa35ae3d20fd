"""Tests for themes, templates and color helpers."""

import pytest

from covermark.theme import (
    DEFAULT_THEME,
    TEMPLATES,
    THEMES,
    css_color,
    get_template,
    get_theme,
    parse_color,
    to_unit_rgb,
)


def test_seven_themes():
    assert set(THEMES) == {"morandi", "orange", "instagram", "green", "pink", "gray", "notebook"}
    assert THEMES["morandi"].primary == "#8B7355"
    assert THEMES["notebook"].accent == "#7F8C8D"


def test_unknown_theme_falls_back():
    assert get_theme("neon").id == DEFAULT_THEME
    assert get_theme(None).id == DEFAULT_THEME


def test_notebook_templates():
    assert sorted(TEMPLATES) == [7, 8, 9]
    assert [TEMPLATES[i].pattern for i in (7, 8, 9)] == ["blank", "lines", "grid"]
    assert all(t.theme == "notebook" for t in TEMPLATES.values())
    assert get_template(8).default_text["title"] == "横线本"
    assert get_template(1) is None
    assert get_template(None) is None


def test_parse_color():
    assert parse_color("#8B7355") == (139, 115, 85, 255)
    assert parse_color("#fff") == (255, 255, 255, 255)
    assert parse_color("#00000080") == (0, 0, 0, 128)
    assert parse_color("#123456", alpha=10) == (18, 52, 86, 10)


@pytest.mark.parametrize("value", ["", "#12", "#GGGGGG", "red", None, "#1234567"])
def test_parse_color_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_css_color():
    assert css_color((26, 32, 44, 255)) == "#1A202C"
    assert css_color((255, 193, 7, 179)) == "rgba(255,193,7,0.7)"


def test_to_unit_rgb():
    assert to_unit_rgb((255, 0, 51, 255)) == pytest.approx((1.0, 0.0, 0.2, 1.0))
