from PyQt6.QtCore import QObject, pyqtSignal

from annoview.services.workspace import Workspace


class CanvasState(QObject):
    """Re-emits workspace changes as Qt signals for widgets."""

    stateChanged = pyqtSignal(object)
    historyChanged = pyqtSignal(int, int)

    def __init__(self, workspace: Workspace, parent=None):
        super().__init__(parent)
        self._workspace = workspace
        self._cursor: int = workspace.history.cursor
        self._length: int = len(workspace.history)
        self._unsubscribe = workspace.subscribe(self._on_workspace_changed)

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def history_length(self) -> int:
        return self._length

    def history_labels(self) -> list[str]:
        return self._workspace.history.labels()

    def detach(self):
        self._unsubscribe()

    def _on_workspace_changed(self, state):
        self.stateChanged.emit(state)
        cursor = self._workspace.history.cursor
        length = len(self._workspace.history)
        if (cursor, length) != (self._cursor, self._length):
            self._cursor = cursor
            self._length = length
            self.historyChanged.emit(cursor, length)
