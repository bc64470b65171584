from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from git2txt import repository
from git2txt.exceptions import InvalidRepositoryError, RepositoryFetchError
from git2txt.repository import (
    download_repository,
    normalize_github_url,
    repository_name,
    temporary_directory,
    validate_input,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "reference",
    [
        "https://github.com/username/repository",
        "git@github.com:username/repository.git",
        "username/repository",
        "user-name/repo_name",
    ],
)
def test_validate_input_accepts_github_references(reference: str) -> None:
    assert validate_input([reference]) == reference


@pytest.mark.unit
def test_validate_input_requires_a_reference() -> None:
    with pytest.raises(InvalidRepositoryError, match="Repository URL is required"):
        validate_input([])


@pytest.mark.unit
def test_validate_input_rejects_other_hosts() -> None:
    with pytest.raises(InvalidRepositoryError, match="Only GitHub repositories are supported"):
        validate_input(["https://gitlab.com/username/repository"])


@pytest.mark.unit
@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        ("username/repository", "https://github.com/username/repository"),
        ("https://github.com/username/repository/", "https://github.com/username/repository"),
        ("git@github.com:username/repository.git", "git@github.com:username/repository.git"),
    ],
)
def test_normalize_github_url(reference: str, expected: str) -> None:
    assert normalize_github_url(reference) == expected


@pytest.mark.unit
def test_normalize_github_url_rejects_unknown_forms() -> None:
    with pytest.raises(InvalidRepositoryError, match="Invalid GitHub URL"):
        normalize_github_url("http://github.com/username/repository")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        ("https://github.com/username/repository", "repository"),
        ("https://github.com/username/repository/", "repository"),
        ("git@github.com:username/my.gitlab.mirror.git", "my.gitlab.mirror"),
        ("username/repository", "repository"),
    ],
)
def test_repository_name(reference: str, expected: str) -> None:
    assert repository_name(reference) == expected


@pytest.mark.unit
def test_temporary_directory_is_removed_on_error() -> None:
    captured: list[Path] = []

    with pytest.raises(RuntimeError), temporary_directory() as workdir:
        captured.append(workdir)
        (workdir / "file.txt").write_text("data", encoding="utf-8")
        msg = "boom"
        raise RuntimeError(msg)

    assert captured
    assert captured[0].name.startswith("git2txt-")
    assert not captured[0].exists()


@pytest.mark.unit
def test_temporary_directory_cleanup_failure_is_not_raised(mocker: MockerFixture) -> None:
    mocker.patch.object(repository.shutil, "rmtree", side_effect=PermissionError("busy"))

    with temporary_directory() as workdir:
        assert workdir.is_dir()

    mocker.stopall()
    repository.cleanup(workdir)
    assert not workdir.exists()


@pytest.mark.unit
def test_download_repository_runs_shallow_clone(tmp_path: Path, mocker: MockerFixture) -> None:
    def fake_clone(command: list[str], **_: object) -> subprocess.CompletedProcess[str]:
        (Path(command[-1]) / "README.md").write_text("# hi", encoding="utf-8")
        return subprocess.CompletedProcess(command, 0, "", "")

    run = mocker.patch.object(repository.subprocess, "run", side_effect=fake_clone)

    assert download_repository("username/repository", tmp_path) == tmp_path
    command = run.call_args.args[0]
    assert command == ["git", "clone", "--depth", "1", "https://github.com/username/repository", str(tmp_path)]


@pytest.mark.unit
def test_download_repository_wraps_clone_failure(tmp_path: Path, mocker: MockerFixture) -> None:
    error = subprocess.CalledProcessError(128, ["git"], output="", stderr="fatal: repository not found\n")
    mocker.patch.object(repository.subprocess, "run", side_effect=error)

    with pytest.raises(RepositoryFetchError, match="repository not found") as exc_info:
        download_repository("username/missing", tmp_path)

    assert exc_info.value.url == "https://github.com/username/missing"


@pytest.mark.unit
def test_download_repository_without_git(tmp_path: Path, mocker: MockerFixture) -> None:
    mocker.patch.object(repository.subprocess, "run", side_effect=FileNotFoundError("git"))

    with pytest.raises(RepositoryFetchError, match="git executable not found"):
        download_repository("username/repository", tmp_path)


@pytest.mark.unit
def test_download_repository_rejects_empty_checkout(tmp_path: Path, mocker: MockerFixture) -> None:
    def fake_clone(command: list[str], **_: object) -> subprocess.CompletedProcess[str]:
        (Path(command[-1]) / ".git").mkdir()
        return subprocess.CompletedProcess(command, 0, "", "")

    mocker.patch.object(repository.subprocess, "run", side_effect=fake_clone)

    with pytest.raises(RepositoryFetchError, match="Repository appears to be empty"):
        download_repository("username/repository", tmp_path)
