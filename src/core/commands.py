# core/commands.py
"""
Commands exposed to the player shell. Each returns a CommandResult; errors are
flattened to human-readable strings at this boundary.
"""
from __future__ import annotations

import logging
from typing import Callable

from core.errors import CoreError
from core.models import CommandResult
from core.state import AppState
from library.scan_library import scan_music_directory

logger = logging.getLogger(__name__)

def scan_directory(path: str) -> CommandResult:
    try:
        songs = scan_music_directory(path)
    except CoreError as e:
        logger.warning("Scan of %s failed: %s", path, e)
        return CommandResult.failure(f"Error scanning directory: {e}")
    return CommandResult.success([s.to_dict() for s in songs])

def _run_server_command(state: AppState, action: Callable[[], str]) -> CommandResult:
    try:
        status = action()
    except CoreError as e:
        logger.error("Kugou API server command failed: %s", e)
        state.notify(str(e), "error")
        return CommandResult.failure(str(e))
    state.status_changed.emit(status)
    return CommandResult.success(status)

def start_kugou_api_server(state: AppState, port: int) -> CommandResult:
    return _run_server_command(state, lambda: state.server.start(port))

def stop_kugou_api_server(state: AppState) -> CommandResult:
    return _run_server_command(state, state.server.stop)
