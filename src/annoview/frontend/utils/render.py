# annoview/frontend/utils/render.py
from __future__ import annotations

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from annoview.models.annotations import AnnotationFile, BBoxAnnotation, PolygonAnnotation
from annoview.models.workspace import (
    ColorMode,
    DrawSettings,
    ImagePayload,
    MaskMode,
    WorkspaceState,
)
from annoview.services.class_colors import color_for_label, to_bgr

logger = logging.getLogger(__name__)

FONT = cv2.FONT_HERSHEY_SIMPLEX
FONT_SCALE = 0.5
LABEL_TEXT_COLOR = (255, 255, 255)


def render(state: WorkspaceState, surface: Optional[np.ndarray] = None) -> Optional[np.ndarray]:
    """
    Paint the workspace onto ``surface`` (or a fresh copy of the base image).

    Only reads ``state``. Returns the painted surface, or None when there is
    neither an image nor a surface to draw on.
    """
    if surface is None:
        if state.image is None:
            return None
        surface = state.image.pixels.copy()
    elif state.image is not None:
        surface[...] = _fit(state.image.pixels, surface.shape)

    height, width = surface.shape[:2]
    settings = state.draw_settings

    if state.mask is not None:
        _draw_mask(surface, state.mask, settings)

    for annotation_file in state.annotation_files:
        if not annotation_file.visible:
            continue
        for annotation in annotation_file.annotations:
            color = _annotation_color(state, annotation_file, annotation.label)
            if isinstance(annotation, BBoxAnnotation):
                _draw_bbox(surface, annotation, color, settings, width, height)
            elif isinstance(annotation, PolygonAnnotation):
                _draw_polygon(surface, annotation, color, settings, width, height)

    return surface


def _fit(pixels: np.ndarray, shape) -> np.ndarray:
    if pixels.shape == shape:
        return pixels
    return cv2.resize(pixels, (shape[1], shape[0]), interpolation=cv2.INTER_LINEAR)


def _annotation_color(
    state: WorkspaceState, annotation_file: AnnotationFile, label: Optional[str]
) -> Tuple[int, int, int]:
    color = annotation_file.color
    if state.draw_settings.color_mode == ColorMode.CLASS and label is not None:
        color = state.class_colors.get(label) or color_for_label(label)
    try:
        return to_bgr(color)
    except ValueError:
        logger.debug(f"Falling back to class color for unparsable color {color!r}")
        return to_bgr(color_for_label(label or annotation_file.name))


def _draw_mask(
    surface: np.ndarray, mask: ImagePayload, settings: DrawSettings
) -> None:
    if settings.mask_mode == MaskMode.HIDDEN:
        return

    gray = cv2.cvtColor(_fit(mask.pixels, surface.shape), cv2.COLOR_BGR2GRAY)
    present = gray > 0
    if not present.any():
        return

    if settings.mask_mode == MaskMode.OUTLINE:
        contours, _ = cv2.findContours(
            present.astype(np.uint8), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE
        )
        cv2.drawContours(surface, contours, -1, (0, 255, 255), settings.line_width)
        return

    colored = cv2.applyColorMap(gray, cv2.COLORMAP_JET)
    blended = cv2.addWeighted(
        surface, 1.0 - settings.mask_opacity, colored, settings.mask_opacity, 0
    )
    surface[present] = blended[present]


def _draw_bbox(
    surface: np.ndarray,
    annotation: BBoxAnnotation,
    color: Tuple[int, int, int],
    settings: DrawSettings,
    width: int,
    height: int,
) -> None:
    x1 = int(round((annotation.x - annotation.w / 2) * width))
    y1 = int(round((annotation.y - annotation.h / 2) * height))
    x2 = int(round((annotation.x + annotation.w / 2) * width))
    y2 = int(round((annotation.y + annotation.h / 2) * height))
    cv2.rectangle(surface, (x1, y1), (x2, y2), color, settings.line_width)
    if settings.show_labels:
        _draw_label(surface, annotation.label, (x1, y1), color)


def _draw_polygon(
    surface: np.ndarray,
    annotation: PolygonAnnotation,
    color: Tuple[int, int, int],
    settings: DrawSettings,
    width: int,
    height: int,
) -> None:
    vertices = annotation.vertices()
    if len(vertices) < 2:
        return
    points = np.array(
        [(round(x * width), round(y * height)) for x, y in vertices], dtype=np.int32
    )
    cv2.polylines(surface, [points], True, color, settings.line_width)
    if settings.show_labels and annotation.label:
        top_left = points.min(axis=0)
        _draw_label(surface, annotation.label, (int(top_left[0]), int(top_left[1])), color)


def _draw_label(
    surface: np.ndarray, text: str, anchor: Tuple[int, int], color: Tuple[int, int, int]
) -> None:
    (label_w, label_h), baseline = cv2.getTextSize(text, FONT, FONT_SCALE, 1)
    x, y = anchor
    top = max(y - label_h - baseline - 2, 0)
    # Label background
    cv2.rectangle(surface, (x, top), (x + label_w + 4, top + label_h + baseline + 2), color, -1)
    cv2.putText(
        surface,
        text,
        (x + 2, top + label_h + 1),
        FONT,
        FONT_SCALE,
        LABEL_TEXT_COLOR,
        1,
        cv2.LINE_AA,
    )
