"""Command-line entry point.

Usage:
    scan-scene export Room.json --out Export/ [--archive]
    scan-scene describe Room.json
    scan-scene preview Room.json --out room.png
    scan-scene catalog --out docs/categories
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from scan_scene.assembler import assemble, describe_scene
from scan_scene.capture import CapturedRoom, CaptureFormatError
from scan_scene.config import ExportConfig, PreviewConfig
from scan_scene.export import ExportError, export_room

log = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure the root logger and install an excepthook.

    Unhandled exceptions are routed through logging so they land in
    whatever handlers are active at the time.
    """
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    _original_excepthook = sys.excepthook

    def _logging_excepthook(exc_type, exc_value, exc_tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            logging.critical(
                "Unhandled exception", exc_info=(exc_type, exc_value, exc_tb)
            )
        _original_excepthook(exc_type, exc_value, exc_tb)

    sys.excepthook = _logging_excepthook


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="scan-scene",
        description="Build and export 3D scenes from room capture records",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    defaults = ExportConfig()
    p_export = sub.add_parser("export", help="Write capture records + scene asset")
    p_export.add_argument("capture", help="Capture record JSON file")
    p_export.add_argument("--out", default=defaults.output_dir, help="Output directory")
    p_export.add_argument("--name", default=defaults.model_name, help="Model name")
    p_export.add_argument(
        "--archive", action="store_true", help="Also zip the export folder"
    )

    p_describe = sub.add_parser("describe", help="Print the assembled scene")
    p_describe.add_argument("capture", help="Capture record JSON file")

    preview_defaults = PreviewConfig()
    p_preview = sub.add_parser("preview", help="Render the scene to PNG")
    p_preview.add_argument("capture", help="Capture record JSON file")
    p_preview.add_argument("--out", default="room.png", help="Output PNG path")
    p_preview.add_argument("--width", type=int, default=preview_defaults.width)
    p_preview.add_argument("--height", type=int, default=preview_defaults.height)

    p_catalog = sub.add_parser("catalog", help="Render every category builder")
    p_catalog.add_argument("--out", default="docs/categories", help="Output directory")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    if args.command == "catalog":
        from scan_scene.preview import render_catalog

        path = render_catalog(Path(args.out))
        print(f"  -> {path}")
        return 0

    try:
        room = CapturedRoom.load(args.capture)
    except (OSError, CaptureFormatError) as e:
        log.error("Could not read capture: %s", e)
        return 1

    graph = assemble(room)

    if args.command == "describe":
        print(describe_scene(graph))
    elif args.command == "export":
        config = ExportConfig(
            output_dir=args.out, model_name=args.name, archive=args.archive
        )
        try:
            bundle = export_room(room, config, graph=graph)
        except ExportError as e:
            log.error("Export failed: %s", e)
            return 1
        for path in bundle.files:
            print(f"  -> {path}")
        if bundle.archive_path:
            print(f"  -> {bundle.archive_path}")
    elif args.command == "preview":
        from scan_scene.preview import render_scene

        config = PreviewConfig(width=args.width, height=args.height)
        print(f"  -> {render_scene(graph, args.out, config)}")

    if graph.errors:
        log.warning("%d malformed entities were skipped", len(graph.errors))
        return 2
    return 0
