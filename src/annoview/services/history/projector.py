"""Rebuilds a workspace state by replaying history from scratch."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Optional

from annoview.models.workspace import DrawSettings, WorkspaceState
from annoview.services.class_colors import ClassColorRegistry

from .actions import (
    AddAnnotationFileAction,
    ClearAction,
    HistoryEntry,
    ImageAction,
    MaskAction,
    RemoveAnnotationFileAction,
    VisibilityAction,
)

logger = logging.getLogger(__name__)


def empty_state(draw_defaults: Optional[DrawSettings] = None) -> WorkspaceState:
    settings = draw_defaults.copy() if draw_defaults else DrawSettings()
    return WorkspaceState(draw_settings=settings)


class StateProjector:
    """Pure replay of ``entries[0..cursor]`` onto an empty workspace."""

    def __init__(self, color_registry: Optional[ClassColorRegistry] = None):
        self.color_registry = color_registry or ClassColorRegistry()
        self._handlers: Dict[type, Callable] = {
            ImageAction: self._apply_image,
            MaskAction: self._apply_mask,
            AddAnnotationFileAction: self._apply_add_file,
            RemoveAnnotationFileAction: self._apply_remove_file,
            VisibilityAction: self._apply_visibility,
            ClearAction: self._apply_clear,
        }

    def project(
        self,
        entries: Iterable[HistoryEntry],
        cursor: int,
        draw_defaults: Optional[DrawSettings] = None,
    ) -> WorkspaceState:
        state = empty_state(draw_defaults)
        for index, entry in enumerate(entries):
            if index > cursor:
                break
            self.apply(state, entry, draw_defaults)
        return state

    def apply(
        self,
        state: WorkspaceState,
        entry: HistoryEntry,
        draw_defaults: Optional[DrawSettings] = None,
    ) -> None:
        """Apply one entry. A bad entry is skipped, never fatal to the replay."""
        action = getattr(entry, "action", None)
        handler = self._handlers.get(type(action))
        if handler is None:
            logger.warning(
                f"Skipping history entry with unknown action {type(action).__name__}"
            )
            return
        try:
            handler(state, action, draw_defaults)
        except Exception:
            logger.warning(
                f"Skipping malformed history entry '{getattr(entry, 'label', '?')}'",
                exc_info=True,
            )

    def _apply_image(self, state, action: ImageAction, draw_defaults) -> None:
        # Loading an image wipes the workspace first, same as the live command.
        self._apply_clear(state, None, draw_defaults)
        state.image = action.image
        state.image_file_name = action.file_name

    def _apply_mask(self, state, action: MaskAction, draw_defaults) -> None:
        state.mask = action.mask

    def _apply_add_file(self, state, action: AddAnnotationFileAction, draw_defaults) -> None:
        annotation_file = action.annotation_file.clone()
        self.color_registry.seed(state.class_colors, annotation_file.labels())
        state.annotation_files.append(annotation_file)

    def _apply_remove_file(
        self, state, action: RemoveAnnotationFileAction, draw_defaults
    ) -> None:
        state.annotation_files = [
            f for f in state.annotation_files if f.name != action.name
        ]

    def _apply_visibility(self, state, action: VisibilityAction, draw_defaults) -> None:
        target = state.find_file(action.name)
        if target is None:
            return
        target.visible = action.visible

    def _apply_clear(self, state, action: ClearAction, draw_defaults) -> None:
        cleared = empty_state(draw_defaults)
        state.image = cleared.image
        state.image_file_name = cleared.image_file_name
        state.mask = cleared.mask
        state.annotation_files = cleared.annotation_files
        state.class_colors = cleared.class_colors
        state.draw_settings = cleared.draw_settings


def project(
    entries: Iterable[HistoryEntry],
    cursor: int,
    draw_defaults: Optional[DrawSettings] = None,
) -> WorkspaceState:
    return StateProjector().project(entries, cursor, draw_defaults)
