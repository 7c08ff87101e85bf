from __future__ import annotations

import os
import shlex
import sys
from dataclasses import dataclass, field
from typing import Optional

from core.errors import DirectoryResolutionError

DEFAULT_PORT = 3000


@dataclass
class ServerConfig:
    # Node entry point of the bundled Kugou API service
    command: list[str] = field(default_factory=lambda: ["node", "app.js"])
    server_dir_name: str = "kugou_api_service"

    # Base directory the server dir is resolved against (install/resource dir).
    resource_dir: Optional[str] = None

    port_env_var: str = "PORT"
    kill_timeout_s: float = 5.0

    @classmethod
    def from_env(cls) -> "ServerConfig":
        cfg = cls()
        command = (os.getenv("KUGOU_API_COMMAND") or "").strip()
        if command:
            cfg.command = shlex.split(command, posix=os.name != "nt")
        resource_dir = os.getenv("KUGOU_RESOURCE_DIR")
        if resource_dir:
            cfg.resource_dir = resource_dir
        return cfg


def resolve_resource_dir(config: ServerConfig) -> str:
    """
    Locate the application's resource directory. Priority:
      1) config.resource_dir
      2) frozen bundle (PyInstaller _MEIPASS, else the executable's folder)
      3) folder of the running __main__ script
    """
    if config.resource_dir:
        return os.path.abspath(config.resource_dir)

    if getattr(sys, "frozen", False):
        bundle_dir = getattr(sys, "_MEIPASS", None)
        if bundle_dir:
            return os.path.abspath(bundle_dir)
        return os.path.dirname(os.path.abspath(sys.executable))

    main_module = sys.modules.get("__main__")
    main_file = getattr(main_module, "__file__", None)
    if main_file:
        return os.path.dirname(os.path.abspath(main_file))

    raise DirectoryResolutionError("Cannot determine the application resource directory")


def resolve_server_dir(config: ServerConfig) -> str:
    return os.path.join(resolve_resource_dir(config), config.server_dir_name)
