from __future__ import annotations

from pathlib import Path

from dockrel.core.result import Err, Ok
from dockrel.git.repository import Repository
from dockrel.release.workspace import Workspace

from ..fakes import FakeRunner


def _workspace(tmp_path: Path, runner: FakeRunner, **kwargs: str) -> Workspace:
    return Workspace(tmp_path, Repository(runner), **kwargs)


def _populate_node_modules(root: Path) -> Path:
    pkg = root / "node_modules" / "puppeteer"
    pkg.mkdir(parents=True)
    (pkg / "package.json").write_text('{"version": "2.0.0"}', encoding="utf-8")
    return root / "node_modules"


def test_paths(tmp_path: Path) -> None:
    ws = _workspace(tmp_path, FakeRunner())
    assert ws.root == tmp_path
    assert ws.manifest_path == tmp_path / "package.json"
    assert ws.descriptor_path == tmp_path / "version.json"
    assert ws.dependency_dir == tmp_path / "node_modules"


def test_reset_hard_resets_then_removes_dependencies(tmp_path: Path) -> None:
    runner = FakeRunner()
    node_modules = _populate_node_modules(tmp_path)

    result = _workspace(tmp_path, runner).reset()

    assert result == Ok(None)
    assert runner.commands("git") == [("git", "reset", "origin/master", "--hard")]
    assert not node_modules.exists()


def test_reset_custom_baseline(tmp_path: Path) -> None:
    runner = FakeRunner()
    _workspace(tmp_path, runner, baseline="origin/main").reset()
    assert runner.commands("git") == [("git", "reset", "origin/main", "--hard")]


def test_reset_is_idempotent(tmp_path: Path) -> None:
    runner = FakeRunner()
    ws = _workspace(tmp_path, runner)
    _populate_node_modules(tmp_path)
    (tmp_path / "Dockerfile").write_text("FROM scratch\n", encoding="utf-8")

    assert ws.reset() == Ok(None)
    before = sorted(p.name for p in tmp_path.iterdir())

    assert ws.reset() == Ok(None)
    after = sorted(p.name for p in tmp_path.iterdir())

    assert before == after == ["Dockerfile"]


def test_git_failure_keeps_dependencies(tmp_path: Path) -> None:
    runner = FakeRunner(fail=lambda cmd: cmd[:2] == ("git", "reset"))
    node_modules = _populate_node_modules(tmp_path)

    result = _workspace(tmp_path, runner).reset()

    assert isinstance(result, Err)
    assert result.error.command == ("git", "reset", "origin/master", "--hard")
    assert node_modules.exists()
