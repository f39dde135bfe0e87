"""
Symbolic link repair for extracted npm trees.

npm 8 and later ship workspace packages as symbolic links inside
``node_modules`` (``node_modules/@npmcli/arborist -> ../../workspaces/arborist``).
Those links do not resolve on every filesystem, Windows in particular.
This module replaces each link with a directory junction pointing at
the same directory, and when junctions cannot be created, moves the
linked directory into the link's place.
"""

import logging
import os
import shutil
from abc import ABC, abstractmethod
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from npmvm.core.filesystem import LinkCreationError, create_junction

logger = logging.getLogger(__name__)


@dataclass
class LinkEntry:
    """A directory entry as seen by the repair walk."""

    path: Path
    is_link: bool
    is_dir: bool


class LinkFilesystem(ABC):
    """Filesystem operations used by the repair walk."""

    @abstractmethod
    def scandir(self, directory: Path) -> List[LinkEntry]:
        """List the entries of a directory without following links."""
        pass

    @abstractmethod
    def readlink(self, path: Path) -> str:
        """Read the raw target of a symbolic link."""
        pass

    @abstractmethod
    def unlink(self, path: Path) -> None:
        """Delete a symbolic link."""
        pass

    @abstractmethod
    def create_junction(self, target: Path, link: Path) -> None:
        """
        Create a directory junction at ``link`` pointing at ``target``.

        Raises:
            LinkCreationError: If junctions are unsupported here
        """
        pass

    @abstractmethod
    def move(self, source: Path, destination: Path) -> None:
        """Move a directory to a new path."""
        pass


def _is_junction(entry: os.DirEntry) -> bool:
    is_junction = getattr(entry, "is_junction", None)
    return bool(is_junction and is_junction())


class NativeLinkFilesystem(LinkFilesystem):
    """LinkFilesystem backed by the real filesystem."""

    def scandir(self, directory: Path) -> List[LinkEntry]:
        with os.scandir(directory) as it:
            return [
                LinkEntry(
                    path=Path(entry.path),
                    is_link=entry.is_symlink(),
                    is_dir=entry.is_dir(follow_symlinks=False) and not _is_junction(entry),
                )
                for entry in it
            ]

    def readlink(self, path: Path) -> str:
        return os.readlink(path)

    def unlink(self, path: Path) -> None:
        os.unlink(path)

    def create_junction(self, target: Path, link: Path) -> None:
        create_junction(target, link)

    def move(self, source: Path, destination: Path) -> None:
        shutil.move(str(source), str(destination))


def _repair_directory(fs: LinkFilesystem, directory: Path) -> Tuple[int, List[Path]]:
    """
    Repair the links directly inside one directory.

    Returns:
        Number of repaired links and the subdirectories left to walk
    """
    fixed = 0
    subdirs: List[Path] = []

    for entry in fs.scandir(directory):
        if entry.is_link:
            link_target = fs.readlink(entry.path)
            target_dir = Path(os.path.normpath(os.path.join(directory, link_target)))
            logger.debug(f"Fix symlink for {entry.path} with target {link_target}")
            fs.unlink(entry.path)
            try:
                fs.create_junction(target_dir, entry.path)
            except (LinkCreationError, OSError) as e:
                logger.debug(f"Junction unavailable ({e}), moving {target_dir} instead")
                fs.move(target_dir, entry.path)
            fixed += 1
        elif entry.is_dir:
            subdirs.append(entry.path)

    return fixed, subdirs


def repair_links(
    directory: Path,
    fs: Optional[LinkFilesystem] = None,
    max_workers: Optional[int] = None,
) -> int:
    """
    Replace every symbolic link under a directory tree.

    Sibling directories are walked concurrently; the order in which
    links are repaired is unspecified.

    Args:
        directory: Root of the tree to walk
        fs: Filesystem operations (default: the real filesystem)
        max_workers: Thread pool size (default: executor default)

    Returns:
        Number of links repaired across the whole tree

    Example:
        >>> repair_links(Path("~/.npmvm/npmv/10.2.0/node_modules").expanduser())
        14
    """
    fs = fs or NativeLinkFilesystem()
    total = 0

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        pending = {pool.submit(_repair_directory, fs, Path(directory))}
        try:
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    fixed, subdirs = future.result()
                    total += fixed
                    pending |= {pool.submit(_repair_directory, fs, d) for d in subdirs}
        except BaseException:
            pool.shutdown(wait=True, cancel_futures=True)
            raise

    return total
