"""Unit tests for the path validator."""

# pyright: reportPrivateUsage=false

import errno
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from cleansafe.safety.protected import SystemPathPolicy
from cleansafe.safety.validator import PathValidator, _check_busy, canonicalize


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_expands_home(self) -> None:
        """A leading ~ is expanded."""
        assert canonicalize("~/x") == os.path.join(os.path.realpath(str(Path.home())), "x")

    def test_keeps_symlink_leaf(self, tmp_path: Path) -> None:
        """A symlink is judged as the link, not its target."""
        target = tmp_path / "target"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)

        assert canonicalize(str(link)) == os.path.join(os.path.realpath(tmp_path), "link")

    def test_resolves_parent_symlinks(self, tmp_path: Path) -> None:
        """Symlinked parent directories are resolved."""
        real = tmp_path / "real"
        real.mkdir()
        (tmp_path / "alias").symlink_to(real)

        assert canonicalize(str(tmp_path / "alias" / "f")) == os.path.join(os.path.realpath(real), "f")


class TestValidate:
    """Tests for PathValidator.validate."""

    async def test_clean_paths_are_valid(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """Ordinary existing files produce no findings."""
        f = workdir / "a.log"
        f.write_text("x")

        result = await PathValidator(policy).validate([str(f)])

        assert result.is_valid
        assert result.warnings == []
        assert result.blockers == []

    async def test_system_path_blocks(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """System paths are blockers and make the result invalid."""
        f = workdir / "a.log"
        f.write_text("x")

        result = await PathValidator(policy).validate(["/usr/bin", str(f)])

        assert not result.is_valid
        assert result.system_paths == ["/usr/bin"]
        assert result.blockers == ["System path detected: /usr/bin"]

    async def test_missing_path_warns(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """Missing paths degrade to a warning and are not otherwise checked."""
        missing = str(workdir / "node_modules")

        result = await PathValidator(policy).validate([missing])

        assert result.is_valid
        assert result.missing_paths == [missing]
        assert result.warnings == [f"Path does not exist: {missing}"]
        assert result.critical_paths == []

    async def test_dead_symlink_exists(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """A dangling symlink is an existing path."""
        link = workdir / "dangling"
        link.symlink_to(workdir / "nowhere")

        result = await PathValidator(policy).validate([str(link)])

        assert result.missing_paths == []

    async def test_critical_path_warns(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """Critical locations produce a warning, not a blocker."""
        git = workdir / ".git"
        git.mkdir()

        result = await PathValidator(policy).validate([str(git)])

        assert result.is_valid
        assert result.critical_paths == [str(git)]
        assert result.warnings == [f"Critical directory detected: {git}"]

    async def test_large_directory_warns(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """Directories above the child threshold produce a warning."""
        big = workdir / "big"
        big.mkdir()
        for i in range(4):
            (big / f"f{i}").write_text("x")

        result = await PathValidator(policy, large_directory_threshold=3).validate([str(big)])

        assert result.large_paths == [str(big)]
        assert result.warnings == [f"Large directory detected: {big} (may take time to process)"]

    async def test_threshold_is_exclusive(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """Exactly the threshold is not large."""
        big = workdir / "big"
        big.mkdir()
        for i in range(3):
            (big / f"f{i}").write_text("x")

        result = await PathValidator(policy, large_directory_threshold=3).validate([str(big)])

        assert result.large_paths == []

    async def test_busy_file_warns(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """Files that cannot be opened because they are busy produce a warning."""
        f = workdir / "db.lock"
        f.write_text("x")

        with patch("cleansafe.safety.validator._check_busy", return_value=True):
            result = await PathValidator(policy).validate([str(f)])

        assert result.active_paths == [str(f)]
        assert result.warnings == [f"File may be in use: {f}"]

    async def test_never_mutates(self, policy: SystemPathPolicy, workdir: Path) -> None:
        """Validation leaves file contents untouched."""
        f = workdir / "keep.txt"
        f.write_text("content")

        await PathValidator(policy).validate([str(f)])

        assert f.read_text() == "content"

    async def test_is_system_path(self, policy: SystemPathPolicy) -> None:
        """Single-path check uses the same policy."""
        validator = PathValidator(policy)

        assert await validator.is_system_path("/etc")
        assert not await validator.is_system_path("/tmp/anything")


class TestCheckBusy:
    """Tests for _check_busy."""

    @pytest.mark.parametrize("code", [errno.EBUSY, errno.ETXTBSY])
    def test_busy_errnos(self, code: int) -> None:
        """EBUSY and ETXTBSY mean busy."""
        with patch("builtins.open", side_effect=OSError(code, "busy")):
            assert _check_busy("/x")

    def test_permission_denied_is_not_busy(self) -> None:
        """Other errors are not reported as busy."""
        with patch("builtins.open", side_effect=PermissionError(errno.EACCES, "denied")):
            assert not _check_busy("/x")

    def test_openable_file(self, tmp_path: Path) -> None:
        """A normal file is not busy and keeps its content."""
        f = tmp_path / "f"
        f.write_text("abc")

        assert not _check_busy(str(f))
        assert f.read_text() == "abc"
