"""Unit tests for font configuration module."""

import os
import tempfile
import unittest

from covermark.font_config import (
    DEFAULT_FONT_FAMILY,
    FONT_CONFIGS,
    FontConfig,
    get_font_config,
)


class TestFontConfig(unittest.TestCase):
    """Test font configuration functionality."""

    def test_helvetica_config(self):
        """Test the standard PDF font configuration."""
        config = get_font_config("Helvetica")
        self.assertIsNotNone(config)
        self.assertEqual(config.pdf_name, "Helvetica")
        self.assertEqual(config.pdf_bold_name, "Helvetica-Bold")
        self.assertFalse(config.is_embedded)

    def test_cjk_config(self):
        """Test the embedded CJK font configuration."""
        config = get_font_config("Noto Sans CJK")
        self.assertIsNotNone(config)
        self.assertTrue(config.is_embedded)
        self.assertTrue(config.font_files)

    def test_default_family_is_configured(self):
        self.assertIn(DEFAULT_FONT_FAMILY, FONT_CONFIGS)

    def test_unknown_font(self):
        self.assertIsNone(get_font_config("Unknown Font"))

    def test_find_font_file(self):
        """Test that the first existing candidate wins."""
        with tempfile.NamedTemporaryFile(suffix=".ttf", delete=False) as f:
            path = f.name
        try:
            config = FontConfig(name="Test", pdf_name="Test", pdf_bold_name="Test-Bold",
                                font_files=("/nonexistent/a.ttf", path))
            self.assertEqual(config.find_font_file(), path)
            self.assertIsNone(config.find_font_file(bold=True))
        finally:
            os.unlink(path)

    def test_default_family_prefers_cjk_faces(self):
        """Test that CJK-capable raster faces are searched before Latin-only ones."""
        files = get_font_config(DEFAULT_FONT_FAMILY).font_files
        cjk_files = get_font_config("Noto Sans CJK").font_files
        dejavu = next(i for i, path in enumerate(files) if "DejaVu" in path)
        self.assertTrue(all(files.index(path) < dejavu for path in cjk_files))

    def test_existing_font_files_skips_missing(self):
        with tempfile.NamedTemporaryFile(suffix=".ttc", delete=False) as f:
            path = f.name
        try:
            config = FontConfig(name="Test", pdf_name="Test", pdf_bold_name="Test-Bold",
                                font_files=("/nonexistent/a.ttc", path, path))
            self.assertEqual(config.existing_font_files(), [path])
        finally:
            os.unlink(path)

    def test_config_is_frozen(self):
        config = get_font_config("Helvetica")
        with self.assertRaises(AttributeError):
            config.name = "Other"


if __name__ == '__main__':
    unittest.main()
