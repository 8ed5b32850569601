"""Project configuration read from ``[tool.grove]`` in pyproject.toml."""

from __future__ import annotations

import shlex
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from grove.errors import ConfigError


PYPROJECT = "pyproject.toml"


class GroveConfig(BaseModel):
    """Settings for the ``grove`` command.

    Attributes
    ----------
    spec_paths:
        Files or directories searched for spec files when none are given.
    inclusion_filter:
        Tags an example must match to run.
    exclusion_filter:
        Tags that remove an example from the run.
    maxfail:
        Stop after this many failures. Zero or negative means no limit.
    verbosity:
        Base verbosity, adjusted by ``-v`` and ``-q``.
    addopts:
        Extra command-line options prepended to argv.
    """

    model_config = ConfigDict(extra="forbid")

    spec_paths: list[str] = Field(default_factory=lambda: ["spec"])
    inclusion_filter: dict[str, Any] = Field(default_factory=dict)
    exclusion_filter: dict[str, Any] = Field(default_factory=dict)
    maxfail: int | None = None
    verbosity: int = 0
    addopts: list[str] = Field(default_factory=list)

    @field_validator("addopts", mode="before")
    @classmethod
    def _split_addopts(cls, value: Any) -> Any:
        if isinstance(value, str):
            return shlex.split(value)
        return value

    @field_validator("maxfail")
    @classmethod
    def _normalize_maxfail(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            return None
        return value


DEFAULT_CONFIG = GroveConfig()


def find_pyproject(start: Path | None = None) -> Path | None:
    """Return the closest pyproject.toml at or above ``start``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / PYPROJECT
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> GroveConfig:
    """Load ``[tool.grove]`` from the nearest pyproject.toml, or the defaults."""
    path = find_pyproject(start)
    if path is None:
        return GroveConfig()

    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(path, exc) from exc

    table = data.get("tool", {}).get("grove", {})
    try:
        return GroveConfig.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(path, exc) from exc


__all__ = ["DEFAULT_CONFIG", "GroveConfig", "find_pyproject", "load_config"]
