"""
Mock objects for testing.
"""

from .filesystem import MemoryLinkFilesystem
from .network import make_tarball, release

__all__ = ["MemoryLinkFilesystem", "make_tarball", "release"]
