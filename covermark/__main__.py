"""Covermark CLI entry point.

Allows running via `python -m covermark` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .composition import CoverDocument, clamp_sticker_scale
from .draft_store import DraftStore, get_store
from .font_config import FONT_CONFIGS
from .layout import LayoutConfigError
from .measure import FontLoadError, MeasurementError, preferred_font_family
from .pdf_generator import PDFExporter
from .preview import PreviewRenderer
from .raster import RasterExporter
from .scene import SceneBuilder
from .theme import THEMES, TEMPLATES
from .version import get_version_string

logger = logging.getLogger(__name__)


def parse_sticker(value: str) -> dict:
    """Parse `SYMBOL@X,Y[,SCALE[,ROTATION]]` in preview coordinates."""
    symbol, sep, numbers = value.rpartition("@")
    if not sep or not symbol:
        raise argparse.ArgumentTypeError(f"Expected SYMBOL@X,Y, got {value!r}")
    parts = numbers.split(",")
    if not 2 <= len(parts) <= 4:
        raise argparse.ArgumentTypeError(f"Expected X,Y[,SCALE[,ROTATION]], got {numbers!r}")
    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number in {numbers!r}")
    sticker = {"symbol": symbol, "x": values[0], "y": values[1]}
    if len(values) > 2:
        sticker["scale"] = clamp_sticker_scale(values[2])
    if len(values) > 3:
        sticker["rotation"] = values[3]
    return sticker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="covermark", description="Compose 3:4 note covers.")
    parser.add_argument("-V", "--version", action="store_true", help="print version and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command")

    render = sub.add_parser("render", help="render a cover to PNG, PDF and/or HTML")
    render.add_argument("--title")
    body = render.add_mutually_exclusive_group()
    body.add_argument("--body", help="body text; use \\n for paragraph breaks")
    body.add_argument("--body-file", type=Path, help="read body text from a file")
    render.add_argument("--highlight", help="word or phrase to highlight")
    render.add_argument("--tag")
    render.add_argument("--theme", choices=sorted(THEMES))
    render.add_argument("--template", type=int, choices=sorted(TEMPLATES))
    render.add_argument("--background", help="background color, e.g. #F8F5F2")
    render.add_argument("--font-size", type=float, help="body font size, 32-80")
    render.add_argument("--gradient", action="store_true", default=None,
                        help="gradient title, highlight and tag")
    render.add_argument("--sticker", action="append", type=parse_sticker, default=[],
                        metavar="SYMBOL@X,Y[,SCALE[,ROTATION]]")
    render.add_argument("--font", choices=sorted(FONT_CONFIGS),
                        help="font family; defaults to a CJK family when one is installed")
    render.add_argument("--png", type=Path, help="write the export bitmap here")
    render.add_argument("--pdf", type=Path, help="write a PDF here")
    render.add_argument("--html", type=Path, help="write the HTML preview here")
    render.add_argument("--load-draft", action="store_true", help="start from the saved draft")
    render.add_argument("--save-draft", action="store_true", help="save the result as the draft")
    render.add_argument("--draft-dir", type=Path, help="directory holding drafts")
    return parser


def build_document(args: argparse.Namespace, store: Optional[DraftStore]) -> CoverDocument:
    document = None
    if args.load_draft and store is not None:
        document = store.load()
        if document is None:
            logger.warning("No saved draft, starting from defaults")
    if document is None:
        document = CoverDocument()

    if args.template is not None:
        document.select_template(TEMPLATES[args.template])
    if args.theme:
        document.theme = args.theme
    if args.background:
        document.background_color = args.background
    if args.font_size is not None:
        document.set_body_font_size(args.font_size)
    if args.gradient is not None:
        document.use_gradient = args.gradient

    text_changes = {}
    for field_name in ("title", "highlight", "tag"):
        value = getattr(args, field_name)
        if value is not None:
            text_changes[field_name] = value
    if args.body is not None:
        text_changes["body"] = args.body.replace("\\n", "\n")
    elif args.body_file is not None:
        text_changes["body"] = args.body_file.read_text(encoding="utf-8")
    if text_changes:
        document.set_text(**text_changes)

    for parsed in args.sticker:
        sticker = document.add_sticker(parsed["symbol"])
        document.update_sticker(sticker.id, **{k: v for k, v in parsed.items() if k != "symbol"})
    return document


def render(args: argparse.Namespace) -> int:
    store = None
    if args.load_draft or args.save_draft:
        store = DraftStore(args.draft_dir) if args.draft_dir else get_store()
    document = build_document(args, store)

    if not (args.png or args.pdf or args.html or args.save_draft):
        print("Nothing to do: give --png, --pdf, --html or --save-draft", file=sys.stderr)
        return 2

    font = args.font or preferred_font_family()

    # One scene feeds every output so they all share the same line breaks
    raster = RasterExporter(font) if args.png else None
    pdf = PDFExporter(font) if args.pdf else None
    if raster is not None:
        builder = raster.builder
    elif pdf is not None:
        builder = pdf.builder
    else:
        builder = SceneBuilder(font_family=font)
    scene = builder.build(document)

    if raster is not None:
        args.png.write_bytes(raster.generate_png(document, scene))
        print(f"Wrote {args.png}")
    if pdf is not None:
        args.pdf.write_bytes(pdf.generate_pdf(document, scene))
        print(f"Wrote {args.pdf}")
        warning = pdf.get_unprintable_warning()
        if warning:
            print(warning, file=sys.stderr)
    if args.html:
        page = PreviewRenderer().render_page(builder.preview(scene), document.text.title)
        args.html.write_text(page, encoding="utf-8")
        print(f"Wrote {args.html}")

    if args.save_draft and store is not None:
        if not store.save(document):
            print(f"Could not save draft to {store.path}", file=sys.stderr)
            return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        print(get_version_string())
        return 0
    if args.command != "render":
        parser.print_help()
        return 2

    try:
        return render(args)
    except (LayoutConfigError, FontLoadError, MeasurementError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
