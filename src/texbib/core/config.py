"""Configuration model for the resolution pipeline.

ResolverConfig

`expand_months` (`bool`)
: Substitute the built-in month abbreviations (`jan` .. `dec`) inside tag and
  preamble values when no string variable of the same name exists. Disable it
  to make every unknown abbreviation an error.

`max_depth` (`int`)
: Longest chain of string variables referencing one another that the resolver
  follows before giving up with `ExpansionDepthError`.

`encoding` (`str`)
: Encoding used by `parse_file` when the caller does not pass one.

Configuration files are YAML documents holding the keys above, either at the
top level or nested under a `texbib` section.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .resolver import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded."""


class ResolverConfig(BaseModel):
    """Options controlling how abbreviations are expanded."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    expand_months: bool = Field(default=True, description="Expand month constants")
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=MAX_DEPTH_LIMIT,
        description="Variable reference depth guard",
    )
    encoding: str = Field(default="utf-8", description="Default file encoding")

    @field_validator("encoding")
    @classmethod
    def check_encoding(cls, value: str) -> str:
        """Reject codecs unknown to the interpreter."""
        import codecs

        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding '{value}'") from exc
        return value


def load_config(path: Path | str) -> ResolverConfig:
    """Read a YAML configuration file into a ``ResolverConfig``."""
    config_path = Path(path)
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration '{config_path}': {exc}") from exc

    try:
        payload: Any = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in '{config_path}': {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration '{config_path}' must be a mapping.")
    section = payload.get("texbib", payload)
    if not isinstance(section, dict):
        raise ConfigError(f"The 'texbib' section of '{config_path}' must be a mapping.")

    try:
        return ResolverConfig.model_validate(section)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in '{config_path}': {exc}") from exc


__all__ = ["ConfigError", "ResolverConfig", "load_config"]
