"""
In-memory LinkFilesystem for repair tests.

Directories, links and files live in dictionaries keyed by POSIX-style
path strings so the repair walk can be observed without touching disk.
"""

import posixpath
import threading
from pathlib import PurePosixPath
from typing import Dict, List, Set

from npmvm.core.filesystem import LinkCreationError
from npmvm.npm.repair import LinkEntry, LinkFilesystem


class MemoryLinkFilesystem(LinkFilesystem):
    """Mock filesystem for the symlink repair walk."""

    def __init__(self, junctions_supported: bool = True):
        self.dirs: Set[str] = {"/"}
        self.files: Set[str] = set()
        self.links: Dict[str, str] = {}
        self.junctions: Dict[str, str] = {}
        self.moves: List[tuple] = []
        self.junctions_supported = junctions_supported
        self._lock = threading.Lock()

    # Setup helpers

    def add_dir(self, path: str) -> None:
        parts = PurePosixPath(path).parts
        for i in range(1, len(parts) + 1):
            self.dirs.add(str(PurePosixPath(*parts[:i])))

    def add_file(self, path: str) -> None:
        self.add_dir(posixpath.dirname(path))
        self.files.add(path)

    def add_link(self, path: str, target: str) -> None:
        self.add_dir(posixpath.dirname(path))
        self.links[path] = target

    def _children(self, directory: str) -> List[str]:
        entries = self.dirs | self.files | set(self.links) | set(self.junctions)
        return sorted(
            p for p in entries if p != directory and posixpath.dirname(p) == directory
        )

    # LinkFilesystem

    def scandir(self, directory) -> List[LinkEntry]:
        directory = str(directory)
        with self._lock:
            return [
                LinkEntry(
                    path=PurePosixPath(p),
                    is_link=p in self.links,
                    is_dir=p in self.dirs and p not in self.junctions,
                )
                for p in self._children(directory)
            ]

    def readlink(self, path) -> str:
        return self.links[str(path)]

    def unlink(self, path) -> None:
        with self._lock:
            del self.links[str(path)]

    def create_junction(self, target, link) -> None:
        if not self.junctions_supported:
            raise LinkCreationError(f"Junctions unsupported for {link}")
        with self._lock:
            self.junctions[str(link)] = str(target)

    def move(self, source, destination) -> None:
        source, destination = str(source), str(destination)
        with self._lock:
            self.moves.append((source, destination))
            for path in sorted(p for p in self.dirs if p == source or p.startswith(source + "/")):
                self.dirs.discard(path)
                self.dirs.add(destination + path[len(source):])
