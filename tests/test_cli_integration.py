import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

from ncaa_checkver import cli


def _run_git(args, cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        text=True,
        capture_output=True,
        check=True,
    )


def _commit_makefile(repo: Path, text: str, message: str) -> None:
    (repo / "barcelona.make").write_text(text)
    _run_git(["add", "barcelona.make"], cwd=repo)
    _run_git(["commit", "-m", message], cwd=repo)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in (
        "NCAA_BARCA_SITE_REPO_PATH",
        "NCAA_BARCA_SITE_MAKEFILE",
        "NCAA_BARCA_SITE_BRANCH",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    # cli.main points the package logger at the captured stderr of the test.
    logger = logging.getLogger("ncaa_checkver")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def site_repo(tmp_path):
    """
    A clone of a small site repo with master and qa branches upstream.

    The clone has an extra local branch checked out, so tests can tell
    whether the tool went back to it.
    """

    upstream = tmp_path / "upstream"
    upstream.mkdir()
    _run_git(["init"], cwd=upstream)
    _run_git(["symbolic-ref", "HEAD", "refs/heads/master"], cwd=upstream)
    _run_git(["config", "user.name", "ncaa-checkver"], cwd=upstream)
    _run_git(["config", "user.email", "ncaa-checkver@example.com"], cwd=upstream)

    _commit_makefile(
        upstream,
        "core = 7.x\n"
        "projects[foo][download][type] = \"git\"\n"
        "projects[foo][download][tag] = \"7.x-1.0\"\n",
        "master makefile",
    )
    _run_git(["checkout", "-b", "qa"], cwd=upstream)
    _commit_makefile(
        upstream,
        "core = 7.x\n"
        "projects[foo][download][type] = \"git\"\n"
        "projects[foo][download][branch] = \"release-1.2\"\n",
        "qa makefile",
    )
    _run_git(["checkout", "master"], cwd=upstream)

    site = tmp_path / "site"
    _run_git(["clone", str(upstream), str(site)], cwd=tmp_path)
    _run_git(["checkout", "-b", "local-work"], cwd=site)
    return site


def _current_branch(repo: Path) -> str:
    return _run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=repo).stdout.strip()


def test_cli_reports_version_and_restores_branch(site_repo, capsys):
    exit_code = cli.main(["foo", "--site-repo", str(site_repo), "-b", "qa"])

    assert exit_code == 0
    assert capsys.readouterr().out == "[foo] Current branch: release-1.2\n"
    assert _current_branch(site_repo) == "local-work"


def test_cli_defaults_branch_from_environment(site_repo, capsys, monkeypatch):
    monkeypatch.setenv("NCAA_BARCA_SITE_REPO_PATH", str(site_repo))
    monkeypatch.setenv("NCAA_BARCA_SITE_BRANCH", "qa")

    exit_code = cli.main(["foo"])

    assert exit_code == 0
    assert capsys.readouterr().out == "[foo] Current branch: release-1.2\n"


def test_cli_reports_missing_module(site_repo, capsys):
    exit_code = cli.main(["bar", "-r", str(site_repo), "--site-branch", "master"])

    assert exit_code == 0
    assert capsys.readouterr().out == "Module not found: bar\n"
    assert _current_branch(site_repo) == "local-work"


def test_cli_fails_on_missing_makefile(site_repo, capsys):
    exit_code = cli.main(["foo", "-r", str(site_repo), "--site-makefile", "nope.make"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert os.path.join(str(site_repo), "nope.make") in captured.err
    assert "could not locate makefile" in captured.err
    assert _current_branch(site_repo) == "local-work"


def test_cli_fails_on_unreadable_repo(tmp_path, capsys):
    missing = str(tmp_path / "missing")

    exit_code = cli.main(["foo", "-r", missing])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert f"problem reading the site repo directory @ {missing}" in captured.err


def test_cli_shows_git_output_when_branch_is_unknown(site_repo, capsys):
    exit_code = cli.main(["foo", "-r", str(site_repo), "-b", "does-not-exist"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "origin/does-not-exist" in captured.out
    assert "checkout origin/does-not-exist" in captured.err
    assert "See output above for clues." in captured.err
    assert _current_branch(site_repo) == "local-work"


def test_cli_runs_as_module(site_repo):
    """
    Run the CLI as a module in a subprocess, pointing PYTHONPATH at the
    project root, the way the tool is invoked from a shell.
    """

    project_root = Path(__file__).resolve().parents[1]
    env = os.environ.copy()
    env["PYTHONPATH"] = str(project_root)

    completed = subprocess.run(
        [sys.executable, "-m", "ncaa_checkver.cli", "foo", "-r", str(site_repo)],
        env=env,
        text=True,
        capture_output=True,
        check=True,
    )

    assert completed.stdout == "[foo] Current tag: 7.x-1.0\n"
    assert _current_branch(site_repo) == "local-work"


def test_cli_uses_first_module_and_ignores_extra_arguments(site_repo, capsys):
    exit_code = cli.main(["foo", "extra", "-r", str(site_repo), "-b", "qa"])

    assert exit_code == 0
    assert capsys.readouterr().out == "[foo] Current branch: release-1.2\n"


def test_cli_accepts_extra_arguments_after_flags(site_repo, capsys):
    exit_code = cli.main(["foo", "-r", str(site_repo), "extra"])

    assert exit_code == 0
    assert capsys.readouterr().out == "[foo] Current tag: 7.x-1.0\n"


def test_cli_returns_to_detached_commit(site_repo, capsys):
    _run_git(["checkout", "--detach", "master"], cwd=site_repo)
    start = _run_git(["rev-parse", "HEAD"], cwd=site_repo).stdout.strip()

    exit_code = cli.main(["foo", "-r", str(site_repo), "-b", "qa"])

    assert exit_code == 0
    assert capsys.readouterr().out == "[foo] Current branch: release-1.2\n"
    assert _run_git(["rev-parse", "HEAD"], cwd=site_repo).stdout.strip() == start


def test_cli_prints_version(capsys):
    try:
        cli.main(["--version"])
    except SystemExit as exc:
        assert exc.code == 0
    else:
        raise AssertionError("expected SystemExit to be raised")

    assert capsys.readouterr().out == "ncaa-checkver Barcelona-0.0.1\n"


def test_cli_verbose_logs_to_stderr(site_repo, capsys):
    exit_code = cli.main(["foo", "-r", str(site_repo), "-v"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out == "[foo] Current tag: 7.x-1.0\n"
    assert "INFO ncaa_checkver.git_adapter: Checking out origin/master" in captured.err
    assert "DEBUG" not in captured.err


def test_cli_is_quiet_without_verbose(site_repo, capsys):
    exit_code = cli.main(["foo", "-r", str(site_repo)])

    assert exit_code == 0
    assert capsys.readouterr().err == ""
