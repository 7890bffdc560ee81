"""Routes a dropped or opened file to the matching decoder or parser."""

import logging
import mimetypes
from pathlib import Path
from typing import Mapping, Optional

from annoview.models.annotations import AnnotationFile
from .class_colors import color_for_label
from .exceptions import MissingImageError, UnsupportedFileTypeError
from .geojson_parser import parse_geojson
from .image_decoder import decode_image, treat_as_mask
from .workspace import Workspace
from .yolo_parser import is_yolo_annotation, parse_yolo

logger = logging.getLogger(__name__)

GEOJSON_MIME = "application/geo+json"
_TIFF_SUFFIXES = (".tif", ".tiff")
_GEOJSON_SUFFIXES = (".geojson",)


def guess_file_type(name: str) -> Optional[str]:
    """MIME type from the file name, with the types ``mimetypes`` may not know."""
    suffix = Path(name).suffix.lower()
    if suffix in _GEOJSON_SUFFIXES:
        return GEOJSON_MIME
    if suffix in _TIFF_SUFFIXES:
        return "image/tiff"
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type


class FileLoader:
    """Decodes files and hands the results to a workspace."""

    def __init__(
        self,
        workspace: Workspace,
        class_names: Optional[Mapping[int, str]] = None,
    ):
        self.workspace = workspace
        self.class_names = class_names

    def load(self, name: str, data: bytes, mime_type: Optional[str] = None) -> None:
        """
        Load one file into the workspace.

        Raises:
            UnsupportedFileTypeError: If the type is unknown or the text is not YOLO.
            MissingImageError: If annotations arrive before any image.
            ImageDecodeError: If image bytes cannot be decoded.
            AnnotationParseError: If GeoJSON is malformed.
        """
        mime_type = mime_type or guess_file_type(name)
        if not mime_type:
            raise UnsupportedFileTypeError(f"Could not determine the file type of {name}")

        logger.info(f"Loading {name} as {mime_type}")
        if mime_type == "text/plain":
            self.load_text(name, data)
        elif mime_type.startswith("image/"):
            self.load_image(name, data)
        elif mime_type == GEOJSON_MIME:
            self.load_geojson(name, data)
        else:
            raise UnsupportedFileTypeError(f"Unsupported file type: {mime_type}")

    def load_path(self, path: str | Path) -> None:
        path = Path(path)
        self.load(path.name, path.read_bytes())

    def load_image(self, name: str, data: bytes) -> None:
        decoded = decode_image(data, name)
        current = self.workspace.state.image
        if decoded.is_grayscale and treat_as_mask(decoded.payload, current):
            self.workspace.set_mask(decoded.payload)
        else:
            self.workspace.set_image(decoded.payload, name)

    def load_text(self, name: str, data: bytes) -> None:
        text = data.decode("utf-8", errors="replace")
        if not is_yolo_annotation(text):
            raise UnsupportedFileTypeError(
                "Text file is not recognized as YOLO annotations"
            )
        self._require_image()

        annotations = parse_yolo(text, self.class_names, source_file=name)
        labels = [annotation.label for annotation in annotations]
        color = (
            self.workspace.get_class_color(labels[0])
            if labels
            else color_for_label(name)
        )
        self.workspace.add_annotation_file(
            AnnotationFile(name=name, annotations=annotations, visible=True, color=color)
        )

    def load_geojson(self, name: str, data: bytes) -> None:
        image = self._require_image()
        annotations = parse_geojson(
            data.decode("utf-8", errors="replace"),
            image.width,
            image.height,
            source_file=name,
        )
        self.workspace.add_annotation_file(
            AnnotationFile(
                name=name,
                annotations=annotations,
                visible=True,
                color=color_for_label(name),
            )
        )

    def _require_image(self):
        image = self.workspace.state.image
        if image is None:
            raise MissingImageError("Add an image first to view the labels")
        return image
