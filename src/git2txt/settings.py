from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_FILE = find_dotenv(usecwd=True)
ENV_PREFIX = "GIT2TXT_"
ENV_FIELDS = frozenset({"threshold", "include_all", "debug", "log_file"})


def environment_defaults(env_file: str | Path | None = None) -> dict[str, str]:
    """Collect ``GIT2TXT_*`` values from a `.env` file and the process environment.

    Process variables win over the `.env` file. Only scalar options can be
    set this way.

    Args:
        env_file: the `.env` file to read; defaults to the one found from the
            working directory, an empty value skips it

    Returns:
        dict[str, str]: raw values keyed by `Settings` field name
    """
    if env_file is None:
        env_file = ENV_FILE
    values: dict[str, str | None] = dict(dotenv_values(env_file)) if env_file else {}
    values.update(os.environ)
    out: dict[str, str] = {}
    for key, value in values.items():
        if value is None or not key.startswith(ENV_PREFIX):
            continue
        name = key.removeprefix(ENV_PREFIX).lower()
        if name in ENV_FIELDS:
            out[name] = value
    return out


class Settings(BaseModel):
    """Configuration settings for one git2txt run."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    repository: str = Field(default="", description="Repository URL, owner/repo or SSH form.")
    output: Path | None = Field(default=None, description="Output file path.")
    threshold: float = Field(default=0.1, ge=0, description="File size threshold in MB.")
    include_all: bool = Field(
        default=False,
        description="Include all files regardless of size or type.",
    )
    exclude: list[str] = Field(default_factory=list, description="Exclusion glob (repeatable).")
    exclude_file: Path | None = Field(default=None, description="File with exclusion patterns.")
    debug: bool = Field(default=False, description="Enable verbose logging.")
    log_file: str = Field(default="", description="Log file path.")

    @classmethod
    def from_sources(
        cls,
        cli_values: dict[str, object],
        env: dict[str, str] | None = None,
    ) -> Settings:
        """Layer CLI values over environment defaults over model defaults.

        CLI values set to None count as "not given".
        """
        merged: dict[str, object] = dict(environment_defaults() if env is None else env)
        merged.update({k: v for k, v in cli_values.items() if v is not None})
        return cls.model_validate(merged)

    def output_path(self, repo_name: str) -> Path:
        return self.output if self.output is not None else Path(f"{repo_name}.txt")
