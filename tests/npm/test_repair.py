"""
Unit tests for symbolic link repair.

The walk runs against an in-memory filesystem so junction support and
failures can be chosen per test.
"""

import os

import pytest

from npmvm.npm.repair import NativeLinkFilesystem, repair_links
from tests.mocks import MemoryLinkFilesystem

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX paths in the fake tree")


@pytest.fixture
def fs():
    fs = MemoryLinkFilesystem()
    fs.add_dir("/npm/workspaces/arborist")
    fs.add_dir("/npm/workspaces/config")
    fs.add_dir("/npm/node_modules")
    return fs


class TestRepairLinks:
    """Tests for repair_links function."""

    def test_replaces_link_with_junction(self, fs):
        """Test a link becomes a junction to the same target."""
        fs.add_link("/npm/node_modules/@npmcli/arborist", "../../workspaces/arborist")

        assert repair_links("/npm/node_modules", fs=fs) == 1

        assert fs.links == {}
        assert fs.junctions == {"/npm/node_modules/@npmcli/arborist": "/npm/workspaces/arborist"}
        assert fs.moves == []

    def test_moves_target_when_junctions_fail(self, fs):
        """Test the linked directory is moved into place when junctions fail."""
        fs.junctions_supported = False
        fs.add_link("/npm/node_modules/@npmcli/arborist", "../../workspaces/arborist")

        assert repair_links("/npm/node_modules", fs=fs) == 1

        assert fs.moves == [("/npm/workspaces/arborist", "/npm/node_modules/@npmcli/arborist")]
        assert "/npm/node_modules/@npmcli/arborist" in fs.dirs
        assert "/npm/workspaces/arborist" not in fs.dirs

    def test_counts_across_nested_directories(self, fs):
        """Test links at every depth are counted once each."""
        fs.add_link("/npm/node_modules/libnpmexec", "../workspaces/libnpmexec")
        fs.add_link("/npm/node_modules/@npmcli/arborist", "../../workspaces/arborist")
        fs.add_link("/npm/node_modules/@npmcli/config", "../../workspaces/config")
        fs.add_link("/npm/node_modules/a/node_modules/b/c", "../../../../workspaces/config")
        fs.add_file("/npm/node_modules/a/index.js")
        fs.add_dir("/npm/workspaces/libnpmexec")

        assert repair_links("/npm/node_modules", fs=fs, max_workers=4) == 4
        assert fs.links == {}

    def test_no_links(self, fs):
        """Test a tree without links reports zero."""
        fs.add_file("/npm/node_modules/abbrev/index.js")
        assert repair_links("/npm/node_modules", fs=fs) == 0

    def test_errors_propagate(self, fs):
        """Test a failing filesystem operation aborts the walk."""

        class BrokenFilesystem(MemoryLinkFilesystem):
            def readlink(self, path):
                raise PermissionError(f"Permission denied: {path}")

        broken = BrokenFilesystem()
        broken.add_dir("/npm/workspaces/arborist")
        broken.add_link("/npm/node_modules/@npmcli/arborist", "../../workspaces/arborist")

        with pytest.raises(PermissionError):
            repair_links("/npm/node_modules", fs=broken)


class TestNativeLinkFilesystem:
    """Tests for repair against the real filesystem."""

    def test_repairs_real_links(self, tmp_path):
        """Test real symlinks are replaced and still reach their target."""
        (tmp_path / "workspaces" / "arborist").mkdir(parents=True)
        (tmp_path / "workspaces" / "arborist" / "index.js").write_text("module.exports = {}")
        scope = tmp_path / "node_modules" / "@npmcli"
        scope.mkdir(parents=True)
        os.symlink("../../workspaces/arborist", scope / "arborist")
        (tmp_path / "node_modules" / "abbrev").mkdir()

        count = repair_links(tmp_path / "node_modules", fs=NativeLinkFilesystem())

        assert count == 1
        assert (scope / "arborist" / "index.js").read_text() == "module.exports = {}"
