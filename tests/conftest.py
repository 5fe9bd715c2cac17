import shutil
import subprocess
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_git_config(monkeypatch, tmp_path_factory):
    """Run every test with a fixed Git identity and no user or system config.

    User-level settings such as commit signing or global hooks would
    otherwise leak into the repositories created by the tests.
    """
    empty_config = tmp_path_factory.getbasetemp() / "empty.gitconfig"
    empty_config.touch()
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(empty_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    )
    return result.stdout


@pytest.fixture
def git_repo(tmp_path):
    """A fresh repository with one baseline commit."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "--quiet")
    (repo / "src").mkdir()
    (repo / "src" / "auth.ts").write_text(
        "export function login(user: string) {\n  return user;\n}\n", encoding="utf-8"
    )
    (repo / "README.md").write_text("# Demo\n", encoding="utf-8")
    git(repo, "add", "--all")
    git(repo, "commit", "--quiet", "-m", "Initial commit")
    return repo


@pytest.fixture
def run_git():
    """Callable running a Git command in a repository and returning stdout."""
    return git
