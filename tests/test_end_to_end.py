import os
import stat

import pytest
from click.testing import CliRunner

import commit_organizer.cli as cli
from commit_organizer.organizer import NothingToCommit, organize
from commit_organizer.sequencing.commit_sequencer import CommitRejected


def make_scenario(repo):
    (repo / "src" / "auth.ts").write_text(
        "export function login(user: string) {\n  return user.trim();\n}\n", encoding="utf-8"
    )
    with open(repo / "README.md", "a", encoding="utf-8") as fh:
        fh.write("\nLogin now trims user names.\n")
    (repo / ".env").write_text("API_KEY=abc123\n", encoding="utf-8")


def install_hook(repo, name, script):
    hook = repo / ".git" / "hooks" / name
    hook.parent.mkdir(parents=True, exist_ok=True)
    hook.write_text(script, encoding="utf-8")
    hook.chmod(hook.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def test_fix_then_docs_and_env_left_untracked(git_repo, run_git):
    make_scenario(git_repo)

    report = organize(git_repo)

    assert [result.message.subject for result in report.commits] == [
        "Fix auth.ts",
        "Update documentation in README.md",
    ]
    assert [e.path for e in report.excluded] == [".env"]
    log = run_git(git_repo, "log", "--format=%s").splitlines()
    assert log == ["Update documentation in README.md", "Fix auth.ts", "Initial commit"]
    assert run_git(git_repo, "show", "--name-only", "--format=", "HEAD~1").split() == ["src/auth.ts"]
    assert run_git(git_repo, "status", "--porcelain").splitlines() == ["?? .env"]
    assert report.commits[-1].sha == run_git(git_repo, "rev-parse", "HEAD").strip()


def test_new_files_and_deletions_are_committed(git_repo, run_git):
    (git_repo / "docs").mkdir()
    (git_repo / "docs" / "guide.md").write_text("# Guide\n", encoding="utf-8")
    (git_repo / "src" / "session.ts").write_text("export class Session {}\n", encoding="utf-8")
    os.remove(git_repo / "src" / "auth.ts")

    report = organize(git_repo)

    assert [g.category.value for g in report.plan] == ["refactor", "feature", "docs"]
    assert run_git(git_repo, "status", "--porcelain") == ""
    assert not (git_repo / "src" / "auth.ts").exists()


def test_untracking_a_file_is_committed(git_repo, run_git):
    run_git(git_repo, "rm", "--cached", "--quiet", "src/auth.ts")

    report = organize(git_repo)

    assert [(g.category.value, g.paths) for g in report.plan] == [("refactor", ["src/auth.ts"])]
    assert "src/auth.ts" not in run_git(git_repo, "ls-files").split()
    assert (git_repo / "src" / "auth.ts").exists()
    assert run_git(git_repo, "status", "--porcelain").splitlines() == ["?? src/auth.ts"]


def test_force_added_ignored_file_is_committed(git_repo, run_git):
    (git_repo / ".gitignore").write_text("*.local\n", encoding="utf-8")
    run_git(git_repo, "add", ".gitignore")
    run_git(git_repo, "commit", "--quiet", "-m", "Ignore local settings")
    (git_repo / "src" / "settings.local").write_text("debug = true\n", encoding="utf-8")
    run_git(git_repo, "add", "-f", "src/settings.local")

    report = organize(git_repo)

    assert [c.message.subject for c in report.commits] == ["Add settings.local"]
    assert "src/settings.local" in run_git(git_repo, "ls-files").split()
    assert run_git(git_repo, "status", "--porcelain") == ""


def test_rejected_commit_stops_the_sequence(git_repo, run_git):
    if os.name == "nt":
        pytest.skip("shell hooks are not available")
    make_scenario(git_repo)
    install_hook(
        git_repo,
        "commit-msg",
        "#!/bin/sh\nif grep -qi documentation \"$1\"; then\n  echo 'no docs today' >&2\n  exit 1\nfi\n",
    )

    with pytest.raises(CommitRejected) as excinfo:
        organize(git_repo)

    error = excinfo.value
    assert error.failed_index == 1
    assert error.last_successful_index == 0
    assert error.group.paths == ["README.md"]
    assert [c.message.subject for c in error.committed] == ["Fix auth.ts"]
    assert "no docs today" in error.reason
    log = run_git(git_repo, "log", "--format=%s").splitlines()
    assert log == ["Fix auth.ts", "Initial commit"]


def test_clean_repository_has_nothing_to_commit(git_repo):
    with pytest.raises(NothingToCommit):
        organize(git_repo)


def test_cli_against_real_repository(git_repo, run_git):
    make_scenario(git_repo)

    result = CliRunner().invoke(cli.main, ["--repo", str(git_repo), "--yes"])

    assert result.exit_code == cli.EXIT_SUCCESS, result.output
    assert run_git(git_repo, "rev-list", "--count", "HEAD").strip() == "3"
