import asyncio
import enum
import os
from dataclasses import dataclass
from typing import AbstractSet, List, Optional, Protocol

from grazer.config import IGNORE_DIRS, Settings


class EntryKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"
    # Symlinks, sockets, devices: never analyzed.
    OTHER = "other"


@dataclass(frozen=True)
class DirEntry:
    name: str
    kind: EntryKind


class FileSystem(Protocol):
    async def stat_kind(self, path: str) -> Optional[EntryKind]:
        """Kind of the object at `path`, or None when nothing exists there."""
        ...

    async def list_dir(self, path: str) -> List[DirEntry]: ...

    async def read_text(self, path: str) -> str: ...


class LocalFileSystem:
    """
    Blocking `os` calls pushed onto worker threads.

    Directory entries are classified without following symlinks, so a link
    inside the tree comes back as EntryKind.OTHER and is never traversed. The
    path handed to `stat_kind` is resolved normally: asking for a symlink by
    name means asking for its target.
    """

    def __init__(self, ignore_dirs: AbstractSet[str] = frozenset()):
        self.ignore_dirs = ignore_dirs

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalFileSystem":
        return cls(ignore_dirs=frozenset(IGNORE_DIRS) if settings.skip_vendored else frozenset())

    async def stat_kind(self, path: str) -> Optional[EntryKind]:
        return await asyncio.to_thread(self._stat_kind, path)

    async def list_dir(self, path: str) -> List[DirEntry]:
        return await asyncio.to_thread(self._list_dir, path)

    async def read_text(self, path: str) -> str:
        return await asyncio.to_thread(self._read_text, path)

    @staticmethod
    def _stat_kind(path: str) -> Optional[EntryKind]:
        if not os.path.exists(path):
            return None
        if os.path.isdir(path):
            return EntryKind.DIRECTORY
        if os.path.isfile(path):
            return EntryKind.FILE
        return EntryKind.OTHER

    def _list_dir(self, path: str) -> List[DirEntry]:
        entries: List[DirEntry] = []
        with os.scandir(path) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False):
                    if entry.name in self.ignore_dirs:
                        continue
                    kind = EntryKind.DIRECTORY
                elif entry.is_file(follow_symlinks=False):
                    kind = EntryKind.FILE
                else:
                    kind = EntryKind.OTHER
                entries.append(DirEntry(entry.name, kind))
        entries.sort(key=lambda e: e.name)
        return entries

    @staticmethod
    def _read_text(path: str) -> str:
        # Undecodable bytes become U+FFFD so binary files still get size metrics.
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return f.read()
