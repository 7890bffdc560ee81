from .annotations import (
    Annotation,
    AnnotationFile,
    BBoxAnnotation,
    PolygonAnnotation,
)
from .workspace import (
    ColorMode,
    DrawSettings,
    ImagePayload,
    MaskMode,
    WorkspaceState,
)

__all__ = [
    "Annotation",
    "AnnotationFile",
    "BBoxAnnotation",
    "PolygonAnnotation",
    "ColorMode",
    "DrawSettings",
    "ImagePayload",
    "MaskMode",
    "WorkspaceState",
]
