"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. Nothing here
touches the real home directory, the real trash, or OS trash commands.
"""

import shutil
from collections.abc import Callable
from pathlib import Path

import pytest
from cleansafe.safety.manager import SafetyManager
from cleansafe.safety.protected import SystemPathPolicy
from cleansafe.trash.base import TrashError, TrashProvider, TrashStrategy


class FakeTrashProvider(TrashProvider):
    """Trash provider that moves paths into a local directory.

    Paths listed in ``reject`` fail every strategy. ``explode`` makes the
    whole batch raise, as a broken provider would.
    """

    platform = "fake"

    def __init__(
        self,
        bin_dir: Path,
        reject: set[str] | None = None,
        supported: bool = True,
        explode: bool = False,
    ) -> None:
        super().__init__(timeout=1.0)
        self.bin_dir = bin_dir
        self.reject = reject or set()
        self.supported = supported
        self.explode = explode
        self.attempted: list[str] = []

    def is_supported(self) -> bool:
        return self.supported

    def strategies(self) -> list[TrashStrategy]:
        return [TrashStrategy("fake", self._move)]

    async def _move(self, path: str) -> None:
        self.attempted.append(path)
        if path in self.reject:
            raise TrashError(f"rejected {path}")
        self.bin_dir.mkdir(parents=True, exist_ok=True)
        shutil.move(path, str(self.bin_dir / f"{len(self.attempted)}_{Path(path).name}"))

    async def trash(self, paths, progress=None):  # type: ignore[no-untyped-def]
        if self.explode:
            raise TrashError("trash service unavailable")
        return await super().trash(paths, progress)

    async def get_trash_size(self) -> int:
        if not self.bin_dir.exists():
            return 0
        return sum(p.stat().st_size for p in self.bin_dir.rglob("*") if p.is_file())


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def policy(home: Path) -> SystemPathPolicy:
    """Linux deny-list policy rooted at the fake home."""
    return SystemPathPolicy.for_platform("linux", home=str(home))


@pytest.fixture
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Point every XDG base directory into tmp_path."""
    dirs = {
        "config": tmp_path / "xdg-config",
        "state": tmp_path / "xdg-state",
        "data": tmp_path / "xdg-data",
    }
    monkeypatch.setenv("XDG_CONFIG_HOME", str(dirs["config"]))
    monkeypatch.setenv("XDG_STATE_HOME", str(dirs["state"]))
    monkeypatch.setenv("XDG_DATA_HOME", str(dirs["data"]))
    return dirs


@pytest.fixture
def make_trash(tmp_path: Path) -> Callable[..., FakeTrashProvider]:
    """Factory for fake trash providers that move into tmp_path/bin."""

    def factory(**kwargs: object) -> FakeTrashProvider:
        return FakeTrashProvider(tmp_path / "bin", **kwargs)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def make_manager(
    tmp_path: Path,
    policy: SystemPathPolicy,
    make_trash: Callable[..., FakeTrashProvider],
) -> Callable[..., SafetyManager]:
    """Factory for SafetyManager instances with a fake trash and tmp quarantine."""

    def factory(trash: TrashProvider | None = None, **kwargs: object) -> SafetyManager:
        return SafetyManager(
            tmp_path / "qroot",
            trash_provider=trash or make_trash(**kwargs),
            policy=policy,
        )

    return factory


@pytest.fixture
def workdir(home: Path) -> Path:
    """A scratch directory inside the fake home holding deletion candidates."""
    path = home / "scratch"
    path.mkdir()
    return path
