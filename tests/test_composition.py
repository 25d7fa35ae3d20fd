"""Tests for the cover document model."""

import unittest

from covermark.composition import CoverDocument, Sticker, TextContent
from covermark.theme import TEMPLATES


class TestCoverDocument(unittest.TestCase):
    """Test editing operations on a cover."""

    def setUp(self):
        self.document = CoverDocument()

    def test_defaults(self):
        self.assertEqual(self.document.theme, "morandi")
        self.assertEqual(self.document.background_color, "#F8F5F2")
        self.assertEqual(self.document.body_font_size, 52)
        self.assertFalse(self.document.use_gradient)
        self.assertEqual(self.document.pattern, "blank")
        self.assertEqual(self.document.text.highlight, "高亮关键词")

    def test_select_template_keeps_text(self):
        self.document.set_text(title="My title")
        self.document.select_template(TEMPLATES[8])
        self.assertEqual(self.document.theme, "notebook")
        self.assertEqual(self.document.background_color, "#FDFDFD")
        self.assertEqual(self.document.pattern, "lines")
        self.assertEqual(self.document.text.title, "My title")

    def test_body_font_size_is_clamped(self):
        self.document.set_body_font_size(10)
        self.assertEqual(self.document.body_font_size, 32)
        self.document.set_body_font_size(500)
        self.assertEqual(self.document.body_font_size, 80)

    def test_add_sticker(self):
        sticker = self.document.add_sticker("⭐", "star")
        self.assertEqual(sticker.id, 1)
        self.assertEqual((sticker.x, sticker.y), (180, 240))
        self.assertEqual(sticker.scale, 1.0)
        self.assertEqual(sticker.rotation, 0.0)
        self.assertEqual(self.document.selected_sticker_id, 1)

        second = self.document.add_sticker("🌸")
        self.assertEqual(second.id, 2)
        self.assertEqual(self.document.selected_sticker_id, 2)

    def test_update_sticker(self):
        sticker = self.document.add_sticker("⭐")
        updated = self.document.update_sticker(sticker.id, x=10, rotation=45, scale=9)
        self.assertEqual(updated.x, 10)
        self.assertEqual(updated.rotation, 45)
        self.assertEqual(updated.scale, 3.0)
        self.assertEqual(self.document.get_sticker(sticker.id), updated)
        self.assertIsNone(self.document.update_sticker(999, x=1))

    def test_delete_selected_sticker_clears_selection(self):
        first = self.document.add_sticker("⭐")
        second = self.document.add_sticker("🌸")
        self.document.delete_sticker(first.id)
        self.assertEqual(self.document.selected_sticker_id, second.id)
        self.document.delete_sticker(second.id)
        self.assertIsNone(self.document.selected_sticker_id)
        self.assertEqual(self.document.stickers, [])

    def test_round_trip(self):
        self.document.select_template(TEMPLATES[9])
        self.document.set_text(title="T", body="line one\nline two", highlight="one", tag="x")
        self.document.use_gradient = True
        self.document.add_sticker("⭐")
        self.document.update_sticker(1, x=12.5, y=30, scale=1.5, rotation=-20)

        data = self.document.to_dict()
        self.assertEqual(data["selectedTemplate"], 9)
        self.assertEqual(data["textContent"]["body"], "line one\nline two")
        restored = CoverDocument.from_dict(data)
        self.assertEqual(restored, self.document)

    def test_from_dict_ignores_malformed_fields(self):
        restored = CoverDocument.from_dict({
            "selectedTemplate": {"id": 7, "name": "空白笔记本"},
            "textContent": {"title": 5, "body": "ok"},
            "colorTheme": "neon",
            "backgroundColor": 12,
            "bodyFontSize": "big",
            "useGradientText": "yes",
            "emojis": [{"symbol": 5}, "junk", {"id": 3, "symbol": "⭐", "scale": 0.01}],
            "selectedEmojiId": 99,
        })
        self.assertEqual(restored.template, TEMPLATES[7])
        self.assertEqual(restored.text.title, TextContent().title)
        self.assertEqual(restored.text.body, "ok")
        self.assertEqual(restored.theme, "morandi")
        self.assertEqual(restored.background_color, "#F8F5F2")
        self.assertEqual(restored.body_font_size, 52)
        self.assertFalse(restored.use_gradient)
        self.assertEqual(len(restored.stickers), 1)
        self.assertEqual(restored.stickers[0].scale, 0.3)
        self.assertIsNone(restored.selected_sticker_id)

    def test_from_dict_clamps_font_size(self):
        restored = CoverDocument.from_dict({"bodyFontSize": 200})
        self.assertEqual(restored.body_font_size, 80)


class TestSticker(unittest.TestCase):

    def test_preview_size(self):
        self.assertEqual(Sticker(id=1, symbol="⭐", scale=2).preview_size(), 64)

    def test_from_dict_requires_symbol(self):
        with self.assertRaises(ValueError):
            Sticker.from_dict({"id": 1})
        with self.assertRaises(ValueError):
            Sticker.from_dict({"id": 1, "symbol": "⭐", "x": "left"})


if __name__ == '__main__':
    unittest.main()
