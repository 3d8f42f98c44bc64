"""Configuration schema for dumpcatalog.

Defines the dumpcatalog.yml configuration file format using Pydantic models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from typing_extensions import Self

from dumpcatalog.rules.file_router import FileRouteRule
from dumpcatalog.rules.table_filter import DEFAULT_FILTER_RULES, BlackWhiteList
from dumpcatalog.rules.table_router import RouteRule
from dumpcatalog.sql.statement import CHARACTER_SETS


class LoaderConfig(BaseModel):
    """
    Root configuration for dumpcatalog.

    This is the schema for dumpcatalog.yml files.

    Example:
        source: ./dump
        character_set: auto
        max_scan_files: 0
        case_sensitive: false

        filter:
          - "*.*"
          - "!mysql.*"

        # either routes or files, not both
        routes:
          - schema_pattern: "shard_*"
            target_schema: shards

        files:
          - pattern: '(?i)^(?:[^/]*/)*([a-z0-9_]+)\\.([a-z0-9_]+)\\.csv$'
            schema: $1
            table: $2
            type: csv
    """

    source_dir: str = Field(alias="source")
    character_set: str = "auto"
    max_scan_files: int = Field(0, ge=0)  # 0 = scan everything
    case_sensitive: bool = False

    filter: list[str] = Field(default_factory=lambda: list(DEFAULT_FILTER_RULES))
    black_white_list: BlackWhiteList | None = None

    routes: list[RouteRule] = Field(default_factory=list)
    files: list[FileRouteRule] = Field(default_factory=list)
    default_file_rules: bool | None = None  # None = only when no files rules

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("character_set", mode="before")
    @classmethod
    def parse_character_set(cls, v: Any) -> str:
        """Normalize and validate the character set name."""
        if not isinstance(v, str):
            raise ValueError(f"character_set must be a string, got {type(v)}")
        v_lower = v.lower()
        if v_lower not in CHARACTER_SETS:
            raise ValueError(
                f"Invalid character_set '{v}'. Valid: {sorted(CHARACTER_SETS)}"
            )
        return v_lower

    @field_validator("filter", mode="before")
    @classmethod
    def parse_filter(cls, v: Any) -> Any:
        """Accept a single rule string as a one-element list."""
        if isinstance(v, str):
            return [v]
        return v

    @model_validator(mode="after")
    def validate_exclusive_options(self) -> Self:
        """Reject option pairs that cannot be combined."""
        if self.routes and self.files:
            raise ValueError(
                "table route is deprecated, can't config both [routes] and [files]"
            )
        if self.has_legacy_black_white_list and self.filter != DEFAULT_FILTER_RULES:
            raise ValueError("filter and black_white_list cannot be both defined")
        return self

    @property
    def source_path(self) -> Path:
        """Get source as Path."""
        return Path(self.source_dir)

    @property
    def has_legacy_black_white_list(self) -> bool:
        return self.black_white_list is not None and not self.black_white_list.is_empty

    @property
    def use_default_file_rules(self) -> bool:
        if self.default_file_rules is None:
            return not self.files
        return self.default_file_rules

    @classmethod
    def from_yaml(cls, content: str) -> LoaderConfig:
        """Parse config from YAML string."""
        data = yaml.safe_load(content)
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: Path | str) -> LoaderConfig:
        """Load config from a YAML file.

        A relative ``source`` is resolved against the config file's directory.
        """
        path = Path(path)
        content = path.read_text(encoding="utf-8")
        config = cls.from_yaml(content)
        if not config.source_path.is_absolute():
            resolved = (path.parent / config.source_path).as_posix()
            config = config.model_copy(update={"source_dir": resolved})
        return config


# Searched in this order in every directory
CONFIG_FILENAMES = [
    "dumpcatalog.yml",
    "dumpcatalog.yaml",
    ".dumpcatalog.yml",
    ".dumpcatalog.yaml",
]


def find_config(start_dir: Path | str | None = None) -> Path | None:
    """Return the nearest config file at or above ``start_dir``.

    The search starts in the working directory when ``start_dir`` is not
    given and stops at the filesystem root.
    """
    current = Path(start_dir or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
    return None


def load_config(path: Path | str | None = None) -> LoaderConfig:
    """Load configuration from ``path``, or from the discovered config file.

    Raises:
        FileNotFoundError: No path was given and no config file was found,
            or the given file does not exist
        ValidationError: The file does not describe a valid config
    """
    if path is None:
        path = find_config()
        if path is None:
            raise FileNotFoundError(
                "No dumpcatalog.yml found. Create one or specify path with --config"
            )
    return LoaderConfig.from_file(path)
