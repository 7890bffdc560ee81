"""Action-logged history for workspace changes."""

from .actions import (
    Action,
    AddAnnotationFileAction,
    ClearAction,
    HistoryEntry,
    ImageAction,
    MaskAction,
    RemoveAnnotationFileAction,
    VisibilityAction,
)
from .log import ActionLog
from .projector import StateProjector, empty_state, project

__all__ = [
    "Action",
    "ActionLog",
    "AddAnnotationFileAction",
    "ClearAction",
    "HistoryEntry",
    "ImageAction",
    "MaskAction",
    "RemoveAnnotationFileAction",
    "StateProjector",
    "VisibilityAction",
    "empty_state",
    "project",
]
