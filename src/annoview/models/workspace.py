"""Payload, settings and materialized state types for a workspace."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from .annotations import AnnotationFile


@dataclass(frozen=True, eq=False)
class ImagePayload:
    """Decoded image (or mask) with an 8-bit BGR pixel buffer.

    The pixel array is read-only once wrapped, so one payload can be held by the
    action log and the live state at the same time. Equality is identity.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        pixels = np.asarray(self.pixels)
        if pixels.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"Pixel buffer shape {pixels.shape[:2]} does not match "
                f"{self.height}x{self.width}"
            )
        pixels = pixels.view()
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "ImagePayload":
        height, width = pixels.shape[:2]
        return cls(width=int(width), height=int(height), pixels=pixels)


class ColorMode(str, Enum):
    FILE = "file"  # One color per annotation file
    CLASS = "class"  # One color per class label


class MaskMode(str, Enum):
    OVERLAY = "overlay"
    OUTLINE = "outline"
    HIDDEN = "hidden"


@dataclass
class DrawSettings:
    """Cosmetic display settings. Never recorded in the history."""

    line_width: int = 2
    show_labels: bool = True
    color_mode: ColorMode = ColorMode.FILE
    mask_mode: MaskMode = MaskMode.OVERLAY
    mask_opacity: float = 0.5

    def copy(self) -> "DrawSettings":
        return replace(self)


@dataclass
class WorkspaceState:
    """Materialized workspace, derivable from (action log, cursor)."""

    image: Optional[ImagePayload] = None
    image_file_name: str = ""
    mask: Optional[ImagePayload] = None
    annotation_files: List[AnnotationFile] = field(default_factory=list)
    class_colors: Dict[str, str] = field(default_factory=dict)
    draw_settings: DrawSettings = field(default_factory=DrawSettings)

    def find_file(self, name: str) -> Optional[AnnotationFile]:
        for annotation_file in self.annotation_files:
            if annotation_file.name == name:
                return annotation_file
        return None

    def file_names(self) -> List[str]:
        return [annotation_file.name for annotation_file in self.annotation_files]

    def copy(self) -> "WorkspaceState":
        """Structural copy. Only the read-only pixel payloads are shared."""
        return WorkspaceState(
            image=self.image,
            image_file_name=self.image_file_name,
            mask=self.mask,
            annotation_files=[f.clone() for f in self.annotation_files],
            class_colors=dict(self.class_colors),
            draw_settings=self.draw_settings.copy(),
        )
