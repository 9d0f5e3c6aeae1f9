"""
Unit tests for wpstack resources.

Tests individual resource behavior in isolation.
"""

import os
import stat

import pytest

from wpstack.core import Platform, Action
from wpstack.core.executor import Executor
from wpstack.resources.file import File


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


class TestFileResource:
    """Unit tests for File resource."""

    def setup_method(self):
        self.platform = Platform.detect()
        self.executor = Executor(platform=self.platform)

    def test_file_check_missing(self, tmp_path):
        """Test checking a file that doesn't exist."""
        file_res = self.executor.add(File(str(tmp_path / "missing.txt"), content="test"))
        state = file_res.check(self.platform)

        assert state["exists"] is False

    def test_file_check_existing(self, tmp_path):
        """Test checking a file that exists."""
        path = tmp_path / "existing.txt"
        path.write_text("existing content")

        file_res = self.executor.add(File(str(path), content="existing content"))
        state = file_res.check(self.platform)

        assert state["exists"] is True
        assert state["type"] == "file"
        assert state["content"] == "existing content"

    def test_file_plan_create(self, tmp_path):
        """Test planning file creation."""
        file_res = self.executor.add(File(str(tmp_path / "new.txt"), content="new content", mode=0o644))
        plan = file_res.plan(self.platform)

        assert plan.action == Action.CREATE
        assert plan.has_changes()
        assert any(c.field == "type" for c in plan.changes)

    def test_file_plan_update(self, tmp_path):
        """A managed file with different content plans an UPDATE."""
        path = tmp_path / "managed.txt"
        path.write_text("old content")

        file_res = self.executor.add(File(str(path), content="new content"))
        plan = file_res.plan(self.platform)

        assert plan.action == Action.UPDATE
        assert any(c.field == "content" for c in plan.changes)

        file_res.apply(plan, self.platform)
        assert path.read_text() == "new content"

    def test_create_only_file_keeps_content(self, tmp_path):
        """replace=False never rewrites an existing file."""
        path = tmp_path / "index.php"
        path.write_text("<?php // customised")

        file_res = self.executor.add(File(str(path), content="<?php // stock", replace=False))
        plan = file_res.plan(self.platform)

        assert plan.action == Action.NONE
        assert not plan.has_changes()
        assert path.read_text() == "<?php // customised"

    def test_create_file_with_parents(self, tmp_path):
        """Creating a file creates missing parent directories."""
        path = tmp_path / "a" / "b" / ".gitkeep"

        file_res = self.executor.add(File(str(path), content="", replace=False))
        file_res.apply(file_res.plan(self.platform), self.platform)

        assert path.is_file()
        assert path.read_text() == ""

    def test_directory_resource(self, tmp_path):
        """Test directory creation with mode."""
        path = tmp_path / "web" / "app" / "uploads"

        dir_res = self.executor.add(File(str(path), ensure="directory", mode=0o755))
        plan = dir_res.plan(self.platform)

        assert plan.action == Action.CREATE
        dir_res.apply(plan, self.platform)

        assert path.is_dir()
        assert _mode(path) == 0o755
        assert dir_res.resource_type() == "dir"

    def test_directory_idempotency(self, tmp_path):
        """A created directory plans no changes the second time."""
        path = tmp_path / "logs"

        dir_res = self.executor.add(File(str(path), ensure="directory", mode=0o755))
        dir_res.apply(dir_res.plan(self.platform), self.platform)

        assert not dir_res.plan(self.platform).has_changes()

    def test_managed_mode_update(self, tmp_path):
        """replace=True brings an existing directory to the desired mode."""
        path = tmp_path / "uploads"
        path.mkdir()
        os.chmod(path, 0o700)

        dir_res = self.executor.add(File(str(path), ensure="directory", mode=0o755))
        plan = dir_res.plan(self.platform)

        assert plan.action == Action.UPDATE
        assert [c.field for c in plan.changes] == ["mode"]

        dir_res.apply(plan, self.platform)
        assert _mode(path) == 0o755

    def test_type_conflict_raises(self, tmp_path):
        """A file where a directory is expected cannot be applied."""
        path = tmp_path / "logs"
        path.write_text("not a directory")

        dir_res = self.executor.add(File(str(path), ensure="directory", replace=False))
        plan = dir_res.plan(self.platform)

        assert plan.action == Action.UPDATE
        with pytest.raises(FileExistsError):
            dir_res.apply(plan, self.platform)

    def test_relative_path_with_root(self, tmp_path):
        """Paths are resolved against root while the id stays relative."""
        file_res = File("web/index.php", content="x", root=str(tmp_path))

        assert file_res.path == os.path.join(str(tmp_path), "web/index.php")
        assert file_res.id == "file:web/index.php"

    def test_invalid_ensure(self):
        with pytest.raises(ValueError):
            File("x", ensure="symlink")
