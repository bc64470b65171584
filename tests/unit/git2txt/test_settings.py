from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from git2txt.settings import Settings, environment_defaults


@pytest.mark.unit
def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.repository == ""
    assert settings.output is None
    assert settings.threshold == pytest.approx(0.1)
    assert settings.include_all is False
    assert settings.exclude == []
    assert settings.exclude_file is None
    assert settings.debug is False


@pytest.mark.unit
def test_settings_output_path_defaults_to_repository_name() -> None:
    assert Settings().output_path("repository") == Path("repository.txt")
    assert Settings(output=Path("out.txt")).output_path("repository") == Path("out.txt")


@pytest.mark.unit
def test_settings_rejects_negative_threshold() -> None:
    with pytest.raises(ValidationError):
        Settings(threshold=-1)


@pytest.mark.unit
def test_from_sources_layers_cli_over_environment() -> None:
    settings = Settings.from_sources(
        {"repository": "username/repository", "threshold": None, "debug": True, "exclude": None},
        env={"threshold": "0.5", "debug": "false", "include_all": "1"},
    )

    assert settings.repository == "username/repository"
    assert settings.threshold == pytest.approx(0.5)
    assert settings.debug is True
    assert settings.include_all is True
    assert settings.exclude == []


@pytest.mark.unit
def test_environment_defaults_reads_prefixed_variables(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("GIT2TXT_THRESHOLD=0.25\nGIT2TXT_DEBUG=true\nOTHER=1\n", encoding="utf-8")
    monkeypatch.setenv("GIT2TXT_DEBUG", "false")
    monkeypatch.setenv("GIT2TXT_EXCLUDE", "*.js")
    monkeypatch.delenv("GIT2TXT_THRESHOLD", raising=False)

    values = environment_defaults(env_file)

    assert values["threshold"] == "0.25"
    assert values["debug"] == "false"
    assert "exclude" not in values
    assert "other" not in values
