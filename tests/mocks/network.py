"""
Canned upstream payloads for testing.

Builds GitHub release entries and npm release tarballs in memory so
catalog and installer tests never touch the network.
"""

import io
import tarfile
from typing import Dict, Optional


def release(tag: str, name: Optional[str] = None) -> dict:
    """Build a GitHub release entry (name defaults to the tag)."""
    return {"tag_name": tag, "name": tag if name is None else name}


def make_tarball(
    files: Dict[str, str],
    symlinks: Optional[Dict[str, str]] = None,
    top: str = "cli-1.0.0",
) -> bytes:
    """
    Build an in-memory .tar.gz whose members all live under ``top/``.

    Args:
        files: Relative path -> text content
        symlinks: Relative link path -> raw link target
        top: Name of the archive's top-level folder

    Returns:
        Compressed archive bytes
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        root = tarfile.TarInfo(top)
        root.type = tarfile.DIRTYPE
        root.mode = 0o755
        tar.addfile(root)

        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))

        for name, target in (symlinks or {}).items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.type = tarfile.SYMTYPE
            info.linkname = target
            tar.addfile(info)

    return buffer.getvalue()
