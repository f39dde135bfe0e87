"""
Cross-platform file system utilities for npmvm.

This module provides the platform-aware file operations the install
pipeline needs:
- Junction creation (Windows junctions, symbolic links elsewhere)
- Streaming tar extraction with leading path components stripped
- Safe file operations (atomic writes, safe deletion)

All operations handle platform differences transparently. Failures
raise FilesystemError subclasses so callers can choose a fallback.
"""

import contextlib
import os
import sys
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional, Union

from npmvm.core.exceptions import NpmvmError

# Platform detection
IS_WINDOWS = os.name == "nt"
IS_UNIX = not IS_WINDOWS


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(NpmvmError):
    """Raised when a filesystem operation on the install tree fails."""

    pass


class LinkCreationError(FilesystemError):
    """Failed to create a junction or symbolic link."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Raised when a release tarball cannot be unpacked."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Raised when a tarball member would land outside the destination."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check whether ``path`` lies inside ``parent``.

    Example:
        >>> is_relative_to(Path("/home/u/.npmvm/npmv/10.2.0"), Path("/home/u/.npmvm/npmv"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Junction Creation
# ============================================================================


def _create_junction_windows(source: Path, target: Path) -> None:
    """
    Create a Windows junction point.

    Junction points are directory links that don't require administrator
    privileges and resolve on filesystems where symbolic links do not.

    Args:
        source: Directory that will be linked to
        target: Location of the junction point

    Raises:
        LinkCreationError: If junction creation fails
    """
    import subprocess

    try:
        # mklink /J doesn't require admin
        result = subprocess.run(
            ["cmd", "/c", "mklink", "/J", str(target), str(source)],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise LinkCreationError(f"Failed to create junction: {e}")

    if result.returncode != 0:
        raise LinkCreationError(
            f"Failed to create junction from {target} to {source}: "
            f"{result.stderr.strip() or result.stdout.strip()}"
        )


def create_junction(source: Union[str, Path], target: Union[str, Path]) -> None:
    """
    Create a directory junction at ``target`` pointing at ``source``.

    On Windows this creates a junction point. On Unix-like systems
    junctions map to relative symbolic links.

    Args:
        source: Existing directory the link points to
        target: Path where the link is created

    Raises:
        LinkCreationError: If the source is not a directory, the target
            already exists, or the platform refuses the link
    """
    source = Path(source)
    target = Path(target)

    if not source.is_dir():
        raise LinkCreationError(f"Junction source must be a directory: {source}")

    if target.exists() or target.is_symlink():
        raise LinkCreationError(f"Junction target already exists: {target}")

    if IS_WINDOWS:
        _create_junction_windows(source.resolve(), target.absolute())
        return

    relative_source = os.path.relpath(source.absolute(), target.absolute().parent)
    try:
        os.symlink(relative_source, target, target_is_directory=True)
    except OSError as e:
        raise LinkCreationError(f"Failed to create link {target}: {e}")


# ============================================================================
# Archive Extraction
# ============================================================================


def _strip_components(name: str, count: int) -> Optional[str]:
    """Drop the first ``count`` components of an archive member path."""
    parts = [p for p in name.replace("\\", "/").split("/") if p and p != "."]
    if len(parts) <= count:
        return None
    return "/".join(parts[count:])


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Args:
        path: Member path from archive
        destination: Extraction destination

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_tar_stream(
    fileobj: BinaryIO,
    destination: Union[str, Path],
    strip_components: int = 0,
) -> int:
    """
    Extract a (possibly compressed) tar stream into a directory.

    The stream is read strictly forward, so it can be the raw body of an
    HTTP response. Compression is detected from the stream itself.

    Args:
        fileobj: Readable binary stream positioned at the archive start
        destination: Directory to extract to (created if missing)
        strip_components: Number of leading path components to drop

    Returns:
        Number of members extracted

    Raises:
        InsecureArchiveError: If a member escapes the destination
        ArchiveExtractionError: If the stream is not a readable tar archive

    Example:
        >>> with open("npm-10.2.0.tar.gz", "rb") as f:
        ...     extract_tar_stream(f, "/tmp/npm", strip_components=1)
    """
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)
    extracted = 0

    try:
        with tarfile.open(fileobj=fileobj, mode="r|*") as tar:
            for member in tar:
                name = _strip_components(member.name, strip_components)
                if name is None:
                    continue
                _validate_archive_path(name, destination)
                member.name = name

                if member.islnk():
                    linkname = _strip_components(member.linkname, strip_components)
                    if linkname is None:
                        continue
                    member.linkname = linkname

                if sys.version_info >= (3, 12):
                    tar.extract(member, destination, filter="data")
                else:
                    tar.extract(member, destination)
                extracted += 1
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, EOFError, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract archive stream: {e}")

    return extracted


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(path: Union[str, Path], text: str) -> None:
    """
    Replace a small text file in one step.

    The text goes to a sibling temporary file that is then renamed over
    the destination, so readers see either the old or the new content.
    Missing parent directories are created.

    Args:
        path: File to (over)write
        text: New UTF-8 content

    Example:
        >>> atomic_write(".npm-version-global", "10.2.0")
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, staging = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(staging, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(staging)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('~/.npmvm/npmv/10.2.0', require_prefix='~/.npmvm/npmv')
    """
    path = Path(path).absolute()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).absolute()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return  # Already gone, nothing to do

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, failed_path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(failed_path, os.W_OK):
                    os.chmod(failed_path, 0o777)
                    func(failed_path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}")


# ============================================================================
# Public API
# ============================================================================

__all__ = [
    # Exceptions
    "FilesystemError",
    "LinkCreationError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    # Path utilities
    "is_relative_to",
    # Link creation
    "create_junction",
    # Archive extraction
    "extract_tar_stream",
    # Safe file operations
    "atomic_write",
    "safe_rmtree",
]
