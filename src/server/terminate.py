from __future__ import annotations

import logging
import os
import signal
import subprocess

from core.errors import TerminationError

logger = logging.getLogger(__name__)


def _is_windows() -> bool:
    return os.name == "nt"


def _reap(proc: subprocess.Popen, timeout: float) -> None:
    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("Process %s did not exit within %.1fs after kill", proc.pid, timeout)


def _terminate_tree_windows(proc: subprocess.Popen, timeout: float = 5.0) -> None:
    """
    taskkill /T walks the child tree; a plain TerminateProcess would orphan
    whatever node spawned.
    """
    try:
        result = subprocess.run(
            ["taskkill", "/F", "/T", "/PID", str(proc.pid)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
        )
    except OSError as e:
        raise TerminationError(f"Failed to run taskkill for pid {proc.pid}", e) from e

    if result.returncode != 0 and proc.poll() is None:
        message = result.stderr.decode(errors="replace").strip() or f"exit code {result.returncode}"
        raise TerminationError(f"taskkill failed for pid {proc.pid}: {message}")

    _reap(proc, timeout)


def _terminate_group_posix(proc: subprocess.Popen, timeout: float = 5.0) -> None:
    # The child was started with start_new_session=True, so its pid is its pgid.
    # The group is signalled even when the leader already exited (is_running()
    # may have reaped it): descendants it left behind keep the pgid reserved, so
    # the id cannot be handed to another group while they live. An empty group
    # gives ESRCH below.
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug("Process group %s already gone", proc.pid)
    except PermissionError as e:
        # macOS reports EPERM for a group whose only member is a zombie leader
        if proc.poll() is None:
            raise TerminationError(f"Failed to kill process group {proc.pid}", e) from e
    except OSError as e:
        raise TerminationError(f"Failed to kill process group {proc.pid}", e) from e

    _reap(proc, timeout)


if _is_windows():
    terminate = _terminate_tree_windows
else:
    terminate = _terminate_group_posix
