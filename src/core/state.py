from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from PySide6.QtCore import QObject, Signal, Slot

from server.config import ServerConfig
from server.supervisor import ProcessSupervisor

@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warn/error

class AppState(QObject):
    notification = Signal(object)   # emits Notify
    status_changed = Signal(str)    # server status text

    def __init__(self, server_config: Optional[ServerConfig] = None):
        super().__init__()
        # One supervisor per host application, handed to commands through this state
        self.server = ProcessSupervisor(server_config or ServerConfig.from_env())

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))
