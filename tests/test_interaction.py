"""Tests for the sticker gesture state machine."""

import pytest

from covermark.composition import CoverDocument, Sticker
from covermark.interaction import InteractionError, InteractionState, StickerInteraction

# 32px preview glyph at (100, 100): centre is (116, 116)
STICKER = Sticker(id=1, symbol="⭐", x=100, y=100)


@pytest.fixture
def interaction():
    return StickerInteraction()


def test_starts_idle(interaction):
    assert interaction.state is InteractionState.IDLE
    assert interaction.active_sticker_id is None


def test_drag(interaction):
    interaction.begin_drag("p1", STICKER, (110, 110))
    assert interaction.state is InteractionState.DRAGGING
    assert interaction.active_sticker_id == 1
    assert interaction.move("p1", (130, 150)) == {"x": 120, "y": 140}
    interaction.end("p1")
    assert interaction.state is InteractionState.IDLE


def test_drag_is_clamped_to_preview(interaction):
    interaction.begin_drag("p1", STICKER, (110, 110))
    assert interaction.move("p1", (1000, 1000)) == {"x": 328, "y": 448}
    assert interaction.move("p1", (-500, -500)) == {"x": 0, "y": 0}


def test_scale(interaction):
    interaction.begin_scale("p1", STICKER, (132, 116))
    assert interaction.state is InteractionState.SCALING
    assert interaction.move("p1", (148, 116))["scale"] == pytest.approx(2.0)
    assert interaction.move("p1", (500, 116))["scale"] == pytest.approx(3.0)
    assert interaction.move("p1", (117, 116))["scale"] == pytest.approx(0.3)


def test_scale_from_centre_keeps_scale(interaction):
    interaction.begin_scale("p1", STICKER, (116, 116))
    assert interaction.move("p1", (150, 150))["scale"] == pytest.approx(1.0)


def test_rotate(interaction):
    rotated = Sticker(id=1, symbol="⭐", x=100, y=100, rotation=10)
    interaction.begin_rotate("p1", rotated, (132, 116))
    assert interaction.state is InteractionState.ROTATING
    assert interaction.move("p1", (116, 132))["rotation"] == pytest.approx(100)
    assert interaction.move("p1", (116, 100))["rotation"] == pytest.approx(-80)


def test_foreign_session_is_rejected(interaction):
    interaction.begin_drag("p1", STICKER, (110, 110))
    with pytest.raises(InteractionError):
        interaction.move("p2", (120, 120))
    with pytest.raises(InteractionError):
        interaction.end("p2")
    assert interaction.state is InteractionState.DRAGGING


def test_one_gesture_at_a_time(interaction):
    interaction.begin_drag("p1", STICKER, (110, 110))
    with pytest.raises(InteractionError):
        interaction.begin_rotate("p2", STICKER, (110, 110))


def test_move_without_gesture(interaction):
    with pytest.raises(InteractionError):
        interaction.move("p1", (0, 0))
    with pytest.raises(InteractionError):
        interaction.end("p1")


def test_cancel(interaction):
    interaction.begin_scale("p1", STICKER, (132, 116))
    interaction.cancel()
    assert interaction.state is InteractionState.IDLE


def test_updates_apply_to_document(interaction):
    document = CoverDocument()
    sticker = document.add_sticker("⭐")
    interaction.begin_drag("p1", sticker, (190, 250))
    document.update_sticker(sticker.id, **interaction.move("p1", (200, 270)))
    interaction.end("p1")
    moved = document.get_sticker(sticker.id)
    assert (moved.x, moved.y) == (190, 260)
