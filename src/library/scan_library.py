# src/library/scan_library.py
from __future__ import annotations

import os
import logging
import time
from typing import Callable, Iterator, Optional

from core.errors import InvalidDirectory, ScanCancelled, TraversalIOError
from core.models import Song, UNKNOWN_ALBUM, UNKNOWN_ARTIST

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".flac", ".wav", ".ogg", ".m4a", ".aac"}
ARTIST_TITLE_SEPARATOR = " - "

_U64 = 1 << 64

def is_music_file(path: str) -> bool:
    ext = os.path.splitext(os.path.basename(path))[1].lower()
    return ext in AUDIO_EXTS

def song_id_for_path(path: str) -> str:
    """
    Cheap deterministic fingerprint: sum of the raw path bytes, wrapped to u64.
    Different paths with the same bytes in another order collide.
    """
    return f"song-{sum(os.fsencode(path)) % _U64}"

def parse_artist_title(stem: str) -> tuple[str, str]:
    """Returns (artist, title) from an "Artist - Title" style file stem."""
    parts = stem.split(ARTIST_TITLE_SEPARATOR)
    if len(parts) >= 2:
        return parts[0], parts[1]
    return UNKNOWN_ARTIST, stem

def extract_song_info(path: str) -> Song | None:
    file_name = os.path.basename(path)
    if not file_name:
        return None

    stem = os.path.splitext(file_name)[0]
    artist, title = parse_artist_title(stem)

    return Song(
        id=song_id_for_path(path),
        title=title,
        artist=artist,
        album=UNKNOWN_ALBUM,
        duration=0,
        path=path,
        cover=None,
    )

def _open_dir(path: str) -> Iterator[os.DirEntry]:
    try:
        return os.scandir(path)
    except OSError as e:
        raise TraversalIOError(path, e) from e

def _dir_key(path: str) -> tuple[int, int] | None:
    # DirEntry.stat() leaves st_ino at zero on Windows
    try:
        st = os.stat(path)
    except OSError:
        return None
    return st.st_dev, st.st_ino

def iter_music_files(root: str, cancel: Optional[Callable[[], bool]] = None) -> Iterator[str]:
    """
    Depth-first walk yielding candidate audio paths in scandir order.

    An explicit stack of open directory iterators replaces recursion, so the
    visit order is the same as a recursive descent. Failing to open or read a
    directory raises TraversalIOError; a failing entry is skipped.
    """
    visited: set[tuple[int, int]] = set()
    root_key = _dir_key(root)
    if root_key is not None:
        visited.add(root_key)

    stack: list[tuple[str, Iterator[os.DirEntry]]] = [(root, _open_dir(root))]
    try:
        while stack:
            if cancel is not None and cancel():
                raise ScanCancelled(root)

            dir_path, it = stack[-1]
            try:
                entry = next(it, None)
            except OSError as e:
                raise TraversalIOError(dir_path, e) from e

            if entry is None:
                stack.pop()
                it.close()
                continue

            try:
                is_dir = entry.is_dir()
            except OSError as e:
                logger.debug("Skipping %s: %s", entry.path, e)
                continue

            if is_dir:
                key = _dir_key(entry.path)
                if key is not None:
                    if key in visited:
                        logger.debug("Skipping already visited directory %s", entry.path)
                        continue
                    visited.add(key)
                stack.append((entry.path, _open_dir(entry.path)))
            elif is_music_file(entry.name):
                yield entry.path
    finally:
        for _, it in stack:
            it.close()

def scan_music_directory(root_path: str, cancel: Optional[Callable[[], bool]] = None) -> list[Song]:
    """
    Scan root_path recursively and return one Song per audio file.

    Raises InvalidDirectory when root_path is missing or not a directory, and
    TraversalIOError when any directory in the tree cannot be enumerated. No
    partial result is returned in that case.
    """
    root_path = os.fspath(root_path)
    if not os.path.isdir(root_path):
        raise InvalidDirectory(root_path)

    start_time = time.time()
    songs: list[Song] = []
    for path in iter_music_files(root_path, cancel=cancel):
        try:
            song = extract_song_info(path)
        except (ValueError, UnicodeError) as e:
            logger.debug("Skipping %s: %s", path, e)
            continue
        if song is not None:
            songs.append(song)

    logger.info(
        "Scanned %s: %d songs in %dms",
        root_path, len(songs), int((time.time() - start_time) * 1000),
    )
    return songs
