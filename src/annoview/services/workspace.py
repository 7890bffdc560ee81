"""Class owning the live workspace state and its action history.

Every structural change goes through this class: it updates the live state
immediately and records the matching action, so the live state always equals a
replay of the history up to the cursor. Navigation (undo, redo, jump, reorder)
rebuilds the live state from the history with the projector.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from annoview.frontend.utils import settings_store
from annoview.models.annotations import AnnotationFile
from annoview.models.workspace import DrawSettings, ImagePayload, WorkspaceState
from .class_colors import ClassColorRegistry
from .history import (
    ActionLog,
    AddAnnotationFileAction,
    ClearAction,
    HistoryEntry,
    ImageAction,
    MaskAction,
    RemoveAnnotationFileAction,
    StateProjector,
    VisibilityAction,
    empty_state,
)

logger = logging.getLogger(__name__)

Observer = Callable[[WorkspaceState], None]


class Workspace:
    def __init__(
        self,
        draw_defaults: Callable[[], DrawSettings] = settings_store.default_draw_settings,
        color_registry: Optional[ClassColorRegistry] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._draw_defaults = draw_defaults
        self.color_registry = color_registry or ClassColorRegistry()
        self.projector = StateProjector(self.color_registry)
        self.history = ActionLog(clock=clock) if clock else ActionLog()
        self._state = empty_state(self._draw_defaults())
        self._observers: List[Observer] = []

    @property
    def state(self) -> WorkspaceState:
        """Live state. Read it, change it only through this class."""
        return self._state

    # --- Observers ---

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call ``observer`` with the live state after every change.

        Returns a callable that removes the observer again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self._state)
            except Exception:
                logger.error(f"Workspace observer {observer!r} failed", exc_info=True)

    # --- Recorded mutations ---

    def set_image(self, image: ImagePayload, name: str) -> bool:
        """Wipe the workspace and load ``image``. Records one entry."""
        self.clear_all(record=False, notify=False)
        self._state.image = image
        self._state.image_file_name = name
        self.history.record(ImageAction(image=image, file_name=name), f"Load image {name}")
        logger.info(f"Loaded image '{name}' ({image.width}x{image.height})")
        self._notify()
        return True

    def set_mask(self, mask: ImagePayload) -> bool:
        self._state.mask = mask
        self.history.record(MaskAction(mask=mask), "Load mask")
        logger.info(f"Loaded mask ({mask.width}x{mask.height})")
        self._notify()
        return True

    def add_annotation_file(self, annotation_file: AnnotationFile) -> bool:
        if self._state.find_file(annotation_file.name) is not None:
            logger.warning(
                f"Annotation file '{annotation_file.name}' is already loaded, ignoring"
            )
            return False
        live_file = annotation_file.clone()
        self.color_registry.seed(self._state.class_colors, live_file.labels())
        self._state.annotation_files.append(live_file)
        self.history.record(
            AddAnnotationFileAction.capture(live_file),
            f"Add annotations {annotation_file.name}",
        )
        logger.info(
            f"Added annotation file '{annotation_file.name}' "
            f"with {len(live_file.annotations)} annotations"
        )
        self._notify()
        return True

    def toggle_annotation_file(self, name: str) -> bool:
        target = self._state.find_file(name)
        if target is None:
            logger.debug(f"Cannot toggle unknown annotation file '{name}'")
            return False
        target.visible = not target.visible
        verb = "Show" if target.visible else "Hide"
        self.history.record(
            VisibilityAction(name=name, visible=target.visible), f"{verb} {name}"
        )
        self._notify()
        return True

    def remove_annotation_file(self, name: str) -> bool:
        if self._state.find_file(name) is None:
            logger.debug(f"Cannot remove unknown annotation file '{name}'")
            return False
        self._state.annotation_files = [
            f for f in self._state.annotation_files if f.name != name
        ]
        self.history.record(RemoveAnnotationFileAction(name=name), f"Remove {name}")
        logger.info(f"Removed annotation file '{name}'")
        self._notify()
        return True

    def clear_all(self, record: bool = True, notify: bool = True) -> bool:
        """Reset the live state. ``record=False`` leaves the history untouched."""
        cleared = empty_state(self._draw_defaults())
        self._state.image = cleared.image
        self._state.image_file_name = cleared.image_file_name
        self._state.mask = cleared.mask
        self._state.annotation_files = cleared.annotation_files
        self._state.class_colors = cleared.class_colors
        self._state.draw_settings = cleared.draw_settings
        if record:
            self.history.record(ClearAction(), "Clear workspace")
            logger.info("Cleared workspace")
        if notify:
            self._notify()
        return True

    # --- Navigation ---

    def undo(self) -> bool:
        return self.jump_to(self.history.cursor - 1)

    def redo(self) -> bool:
        return self.jump_to(self.history.cursor + 1)

    def jump_to(self, index: int) -> bool:
        if not self.history.move_to(index):
            return False
        self._rebuild()
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def reorder_history(self, new_order: Iterable[HistoryEntry]) -> None:
        self.history.reorder(new_order)
        self._rebuild()

    def reset(self) -> None:
        """Drop the history and the live state together."""
        self.history.clear()
        self._state = empty_state(self._draw_defaults())
        logger.info("Workspace reset")
        self._notify()

    def _rebuild(self) -> None:
        self._state = self.projector.project(
            self.history.entries, self.history.cursor, self._draw_defaults()
        )
        logger.debug(
            f"Rebuilt workspace at history index {self.history.cursor} "
            f"of {len(self.history)}"
        )
        self._notify()

    # --- Unrecorded presentation state ---

    def get_class_color(self, label: str) -> str:
        return self.color_registry.color(self._state.class_colors, label)

    def set_class_color(self, label: str, color: str) -> bool:
        """Override a class color in the live state only (lost on replay)."""
        try:
            self.color_registry.override(self._state.class_colors, label, color)
        except ValueError:
            logger.warning(f"Ignoring unsupported color '{color}' for class '{label}'")
            return False
        self._notify()
        return True

    def update_draw_settings(self, **changes) -> DrawSettings:
        """Apply validated draw setting changes directly to the live state."""
        validated = {
            name: settings_store.validate_setting(name, value)
            for name, value in changes.items()
        }
        settings = self._state.draw_settings
        for name, value in validated.items():
            setattr(settings, name, value)
        if validated:
            self._notify()
        return settings
