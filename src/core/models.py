# core/models.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any

UNKNOWN_ARTIST = "unknown artist"
UNKNOWN_ALBUM = "unknown album"

@dataclass(frozen=True)
class Song:
    id: str             # "song-<byte sum of path>"
    title: str
    artist: str
    album: str
    duration: int       # seconds; always 0 without tag decoding
    path: str           # path as produced by the walk
    cover: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

@dataclass(frozen=True)
class CommandResult:
    ok: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, value: Any) -> "CommandResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "CommandResult":
        return cls(ok=False, error=error)
