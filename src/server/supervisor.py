from __future__ import annotations

import logging
import os
import subprocess
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from core.errors import CoreError, LockError, SpawnError, TerminationError
from .config import ServerConfig, resolve_server_dir
from .terminate import terminate

logger = logging.getLogger(__name__)

STATUS_ALREADY_RUNNING = "Kugou API server is already running"
STATUS_ALREADY_STOPPED = "Kugou API server is already stopped"
STATUS_STOPPED = "Kugou API server stopped"


def _is_windows() -> bool:
    return os.name == "nt"


class ProcessSupervisor:
    """
    Owns at most one Kugou API server child process.

    start/stop/on_shutdown are serialized by a single lock, including the
    spawn and kill calls, so the server can never be spawned or killed twice.
    An unexpected exception inside a locked section poisons the supervisor:
    every later call raises LockError.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        terminator: Callable[..., None] = terminate,
    ):
        self.config = config or ServerConfig()
        self._terminate = terminator

        self._lock = threading.Lock()
        self._poisoned = False

        # Process handle
        self._proc: Optional[subprocess.Popen] = None

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            if self._poisoned:
                raise LockError("Kugou API server state is poisoned by an earlier failure")
            try:
                yield
            except CoreError:
                raise
            except BaseException:
                self._poisoned = True
                raise

    # ---- lifecycle ----

    def start(self, port: int) -> str:
        with self._locked():
            if self._proc is not None:
                return STATUS_ALREADY_RUNNING

            if not self.config.command:
                raise SpawnError("Kugou API server command is empty")

            server_dir = resolve_server_dir(self.config)

            env = os.environ.copy()
            env[self.config.port_env_var] = str(port)

            kwargs: dict = {}
            if _is_windows():
                kwargs["creationflags"] = (
                    getattr(subprocess, "CREATE_NO_WINDOW", 0)
                    | getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)
                )
            else:
                # Own process group, so stop() can kill node and everything it forks
                kwargs["start_new_session"] = True

            try:
                proc = subprocess.Popen(
                    self.config.command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    cwd=server_dir,
                    env=env,
                    **kwargs,
                )
            except (OSError, ValueError, IndexError) as e:
                # ValueError: NUL in an argument or the cwd; IndexError: empty argv
                raise SpawnError(f"Failed to start Kugou API server in {server_dir}", e) from e

            self._proc = proc
            logger.info("Kugou API server started (pid=%s, port=%s, cwd=%s)", proc.pid, port, server_dir)
            return f"Kugou API server started on port {port}"

    def stop(self) -> str:
        with self._locked():
            # Clear before killing: a failed kill must not leave a stale handle behind
            proc, self._proc = self._proc, None
            if proc is None:
                return STATUS_ALREADY_STOPPED

            self._terminate(proc, timeout=self.config.kill_timeout_s)
            logger.info("Kugou API server stopped (pid=%s)", proc.pid)
            return STATUS_STOPPED

    def on_shutdown(self) -> None:
        """Best-effort stop for the application close sequence; never raises CoreError."""
        try:
            self.stop()
        except (TerminationError, LockError) as e:
            logger.error("Failed to stop Kugou API server on shutdown: %s", e)

    # ---- introspection ----

    @property
    def pid(self) -> Optional[int]:
        with self._lock:
            return self._proc.pid if self._proc is not None else None

    def is_running(self) -> bool:
        with self._lock:
            return self._proc is not None and self._proc.poll() is None


def install_shutdown_hook(app, supervisor: ProcessSupervisor) -> None:
    """Stop the server when the Qt application is about to quit."""
    app.aboutToQuit.connect(supervisor.on_shutdown)
