# ui/workers/server_worker.py
from __future__ import annotations

from PySide6.QtCore import QThread, Signal

from server.supervisor import ProcessSupervisor

class ServerCommandWorker(QThread):
    """Runs a supervisor start/stop off the GUI thread (spawn and kill may block)."""
    finished_signal = Signal(bool, str)    # ok, status or error message

    def __init__(self, supervisor: ProcessSupervisor, action: str, port: int | None = None, parent=None):
        super().__init__(parent)
        if action not in ("start", "stop"):
            raise ValueError(f"Unknown server action: {action}")
        if action == "start" and port is None:
            raise ValueError("start requires a port")
        self.supervisor = supervisor
        self.action = action
        self.port = port

    def run(self):
        try:
            if self.action == "start":
                status = self.supervisor.start(self.port)
            else:
                status = self.supervisor.stop()
        except Exception as e:
            self.finished_signal.emit(False, str(e))
            return
        self.finished_signal.emit(True, status)
