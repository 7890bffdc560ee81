"""Parser for YOLO style ``class x y w h`` label files."""

import logging
import math
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from pydantic import ValidationError

from annoview.models.annotations import BBoxAnnotation
from .exceptions import AnnotationParseError

logger = logging.getLogger(__name__)

SNIFF_CHARS = 2048
SNIFF_LINES = 10
_YOLO_LINE = re.compile(r"^\d+(?:\s+\d*\.?\d+){4,}$")


def parse_yolo(
    content: str,
    class_names: Optional[Mapping[int, str]] = None,
    source_file: Optional[str] = None,
) -> List[BBoxAnnotation]:
    """
    Parse YOLO detection lines into bounding box annotations.

    Blank lines, ``#`` comments and lines with fewer than five fields are
    skipped. Lines with non numeric values or coordinates outside [0, 1] are
    skipped with a warning.
    """
    annotations: List[BBoxAnnotation] = []
    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        parts = trimmed.split()
        if len(parts) < 5:
            continue

        try:
            class_id = int(float(parts[0]))
            x, y, w, h = (float(value) for value in parts[1:5])
        except (ValueError, OverflowError):
            logger.warning(f"Invalid annotation values: {trimmed}")
            continue

        if not all(math.isfinite(value) and 0 <= value <= 1 for value in (x, y, w, h)):
            logger.warning(f"Invalid annotation values: {trimmed}")
            continue

        label = str(class_id)
        if class_names is not None:
            label = class_names.get(class_id, label)

        try:
            annotation = BBoxAnnotation(
                label=label, x=x, y=y, w=w, h=h, source_file=source_file
            )
        except ValidationError as exc:
            logger.warning(f"Invalid annotation {trimmed}: {exc}")
            continue
        annotations.append(annotation)

    return annotations


def is_yolo_annotation(content: str) -> bool:
    """Peek at the first lines and check that all of them look like YOLO rows."""
    chunk = content[:SNIFF_CHARS]
    lines = [line for line in re.split(r"\r?\n", chunk) if line][:SNIFF_LINES]
    if not lines:
        return False

    if len(lines) != 1:
        # The last line may have been cut by the peek window.
        lines.pop()

    for line in lines:
        if not _YOLO_LINE.match(line.strip()):
            return False
        coords = [float(value) for value in line.split()[1:]]
        if not all(0 <= value <= 1 for value in coords):
            return False
    return True


def load_class_names(path: str | Path) -> Dict[int, str]:
    """Read the ``names`` entry of a YOLO dataset YAML (list or id -> name map)."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise AnnotationParseError(f"Failed to read class names from '{path}': {exc}")

    names = data.get("names") if isinstance(data, dict) else None
    if isinstance(names, list):
        return {index: str(name) for index, name in enumerate(names)}
    if isinstance(names, dict):
        return {int(key): str(value) for key, value in names.items()}
    raise AnnotationParseError(f"No 'names' list or mapping found in '{path}'")
