"""Recorded workspace actions and the history entries that carry them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from annoview.models.annotations import AnnotationFile
from annoview.models.workspace import ImagePayload


@dataclass(frozen=True)
class ImageAction:
    """A new base image replaced the workspace contents."""

    kind: ClassVar[str] = "image"
    image: ImagePayload
    file_name: str


@dataclass(frozen=True)
class MaskAction:
    kind: ClassVar[str] = "mask"
    mask: ImagePayload


@dataclass(frozen=True)
class AddAnnotationFileAction:
    """Carries its own copy of the file; never the instance held by live state."""

    kind: ClassVar[str] = "annotation:add"
    annotation_file: AnnotationFile

    @classmethod
    def capture(cls, annotation_file: AnnotationFile) -> "AddAnnotationFileAction":
        return cls(annotation_file=annotation_file.clone())


@dataclass(frozen=True)
class RemoveAnnotationFileAction:
    kind: ClassVar[str] = "annotation:remove"
    name: str


@dataclass(frozen=True)
class VisibilityAction:
    """Carries the resulting visibility flag, not a toggle."""

    kind: ClassVar[str] = "visibility"
    name: str
    visible: bool


@dataclass(frozen=True)
class ClearAction:
    kind: ClassVar[str] = "clear"


Action = Union[
    ImageAction,
    MaskAction,
    AddAnnotationFileAction,
    RemoveAnnotationFileAction,
    VisibilityAction,
    ClearAction,
]


@dataclass(frozen=True)
class HistoryEntry:
    """One logged action with its display label and creation stamp.

    The timestamp (nanoseconds) is unique within a log and identifies the entry
    across reorders.
    """

    action: Action
    label: str
    timestamp: int
