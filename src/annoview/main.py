"""
annoview

Command-line tool that loads an image, an optional mask and annotation files
into an annotation workspace, optionally walks its history back, and renders
the result to an image file.

Usage:
    annoview FILE [FILE ...] --output OUTPUT_IMAGE [OPTIONS]

Files are loaded in the given order, the same way they would be dropped onto
the canvas: the first color image becomes the base image, a grayscale image of
the same size becomes the mask, .txt files are read as YOLO labels and
.geojson files as polygons.
"""

import argparse
import logging
import sys

import cv2

from annoview.controllers.workspace_controller import WorkspaceController
from annoview.frontend.exceptions import FrontendException
from annoview.frontend.utils import settings_store
from annoview.logger_config import setup_logger
from annoview.models.workspace import ColorMode, MaskMode
from annoview.services.exceptions import DomainException, InternalException
from annoview.services.workspace import Workspace
from annoview.version import get_version

logger = logging.getLogger(__name__)


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="annoview",
        description="Render images with mask and annotation overlays.",
    )
    parser.add_argument(
        "--version", action="version", version=f"annoview {get_version()}"
    )
    parser.add_argument("files", nargs="+", help="Image, mask and annotation files")
    parser.add_argument("--output", "-o", help="Path of the rendered output image")

    history = parser.add_argument_group("History")
    history.add_argument(
        "--undo", type=int, default=0, help="Undo this many steps before rendering"
    )
    history.add_argument(
        "--history", action="store_true", help="Print the action history"
    )

    drawing = parser.add_argument_group("Drawing")
    drawing.add_argument("--settings", help="YAML file with display defaults")
    drawing.add_argument(
        "--class-names", help="YOLO dataset YAML mapping class ids to names"
    )
    drawing.add_argument("--line-width", type=int, help="Stroke width in pixels")
    drawing.add_argument(
        "--hide-labels", action="store_true", help="Do not draw class labels"
    )
    drawing.add_argument(
        "--color-mode",
        choices=[mode.value for mode in ColorMode],
        help="Color annotations per file or per class",
    )
    drawing.add_argument(
        "--mask-mode",
        choices=[mode.value for mode in MaskMode],
        help="How to draw the mask",
    )
    drawing.add_argument("--mask-opacity", type=float, help="Mask opacity, 0-1")

    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _draw_changes(args: argparse.Namespace) -> dict:
    changes = {}
    if args.line_width is not None:
        changes["line_width"] = args.line_width
    if args.hide_labels:
        changes["show_labels"] = False
    if args.color_mode:
        changes["color_mode"] = args.color_mode
    if args.mask_mode:
        changes["mask_mode"] = args.mask_mode
    if args.mask_opacity is not None:
        changes["mask_opacity"] = args.mask_opacity
    return changes


def run(args: argparse.Namespace) -> int:
    if args.settings:
        settings_store.load_settings_file(args.settings)

    controller = WorkspaceController(Workspace())
    if args.class_names:
        controller.set_class_names_file(args.class_names)

    for path in args.files:
        controller.load_path(path)

    for _ in range(max(args.undo, 0)):
        if not controller.undo():
            break

    controller.update_draw_settings(**_draw_changes(args))

    if args.history:
        cursor = controller.history_cursor()
        for index, label in enumerate(controller.history_labels()):
            marker = "*" if index == cursor else " "
            print(f"{marker} {index:3d}  {label}")

    if args.output:
        rendered = controller.render()
        if rendered is None:
            logger.error("Nothing to render: no image is loaded at this point in history")
            return 1
        if not cv2.imwrite(args.output, rendered):
            logger.error(f"Could not write {args.output}")
            return 1
        logger.info(f"Wrote {args.output}")
    return 0


def main(argv=None) -> int:
    args = parse_arguments(argv)
    setup_logger(logging.DEBUG if args.verbose else logging.INFO)
    try:
        return run(args)
    except (DomainException, FrontendException) as e:
        logger.error(str(e))
        return 1
    except InternalException as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
