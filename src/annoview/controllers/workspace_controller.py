"""
Class representing the controller to the workspace.

The purpose of this controller is to give a UI or the command line one
error-handled entry point for loading files, editing and navigating history.
"""

from pathlib import Path
from typing import List, Optional

import numpy as np

from annoview.frontend.utils.render import render
from annoview.models.workspace import WorkspaceState
from annoview.services.file_loader import FileLoader
from annoview.services.workspace import Workspace
from annoview.services.yolo_parser import load_class_names
from .error_handler_middleware import error_handler


class WorkspaceController:
    def __init__(self, workspace: Workspace, file_loader: Optional[FileLoader] = None):
        self.workspace = workspace
        self.file_loader = file_loader or FileLoader(workspace)

    @error_handler
    def load_file(self, name: str, data: bytes) -> None:
        self.file_loader.load(name, data)

    @error_handler
    def load_path(self, path: str | Path) -> None:
        self.file_loader.load_path(path)

    @error_handler
    def set_class_names_file(self, path: str | Path) -> None:
        self.file_loader.class_names = load_class_names(path)

    @error_handler
    def toggle_annotation_file(self, name: str) -> bool:
        return self.workspace.toggle_annotation_file(name)

    @error_handler
    def remove_annotation_file(self, name: str) -> bool:
        return self.workspace.remove_annotation_file(name)

    @error_handler
    def clear_all(self) -> bool:
        return self.workspace.clear_all()

    @error_handler
    def undo(self) -> bool:
        return self.workspace.undo()

    @error_handler
    def redo(self) -> bool:
        return self.workspace.redo()

    @error_handler
    def jump_to(self, index: int) -> bool:
        return self.workspace.jump_to(index)

    @error_handler
    def history_labels(self) -> List[str]:
        return self.workspace.history.labels()

    @error_handler
    def history_cursor(self) -> int:
        return self.workspace.history.cursor

    @error_handler
    def update_draw_settings(self, **changes) -> None:
        self.workspace.update_draw_settings(**changes)

    @error_handler
    def set_class_color(self, label: str, color: str) -> bool:
        return self.workspace.set_class_color(label, color)

    @error_handler
    def get_state(self) -> WorkspaceState:
        return self.workspace.state

    @error_handler
    def render(self, surface: Optional[np.ndarray] = None) -> Optional[np.ndarray]:
        return render(self.workspace.state, surface)
