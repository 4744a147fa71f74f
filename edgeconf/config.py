"""Reading `fastly.toml` package manifests and their `local_server` section."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .backends import Backend, parse_backends
from .dictionaries import Dictionary, DictionaryName, parse_dictionaries
from .errors import ConfigIoError, InvalidFastlyToml


def _optional_table(table: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise InvalidFastlyToml(f"invalid type for `{key}`: expected a table")
    return value


def _optional_string(table: Mapping[str, Any], key: str) -> str:
    value = table.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidFastlyToml(f"invalid type for `{key}`: expected a string")
    return value


def _optional_strings(table: Mapping[str, Any], key: str) -> list[str]:
    value = table.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidFastlyToml(
            f"invalid type for `{key}`: expected an array of strings"
        )
    return list(value)


@dataclass
class LocalServerConfig:
    """Settings for local testing: backend and dictionary definitions."""

    backends: dict[str, Backend] = field(default_factory=dict)
    dictionaries: dict[DictionaryName, Dictionary] = field(default_factory=dict)

    @classmethod
    def from_table(cls, table: Mapping[str, Any]) -> "LocalServerConfig":
        """Validate the contents of a `local_server` table.

        Keys other than `backends` and `dictionaries` are ignored.
        """
        if not isinstance(table, Mapping):
            raise InvalidFastlyToml("invalid type for `local_server`: expected a table")
        backends_table = _optional_table(table, "backends")
        dictionaries_table = _optional_table(table, "dictionaries")
        backends = parse_backends(backends_table) if backends_table is not None else {}
        dictionaries = (
            parse_dictionaries(dictionaries_table)
            if dictionaries_table is not None
            else {}
        )
        return cls(backends=backends, dictionaries=dictionaries)


@dataclass
class FastlyConfig:
    """The fields of a package manifest that matter for local testing."""

    name: str = ""
    description: str = ""
    authors: list[str] = field(default_factory=list)
    language: str = ""
    local_server: LocalServerConfig = field(default_factory=LocalServerConfig)

    def backends(self) -> dict[str, Backend]:
        """The backend definitions, keyed by name."""
        return self.local_server.backends

    def dictionaries(self) -> dict[DictionaryName, Dictionary]:
        """The dictionary definitions, keyed by name."""
        return self.local_server.dictionaries

    @classmethod
    def from_file(cls, path: str | Path) -> "FastlyConfig":
        """Read and parse a manifest file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigIoError(path, exc) from exc
        except UnicodeDecodeError as exc:
            err = OSError("stream did not contain valid UTF-8")
            raise ConfigIoError(path, err) from exc
        return cls.from_str(text)

    @classmethod
    def from_str(cls, text: str) -> "FastlyConfig":
        """Parse manifest TOML text; every top-level field is optional."""
        try:
            document = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise InvalidFastlyToml(exc) from exc
        local_table = _optional_table(document, "local_server")
        local_server = (
            LocalServerConfig.from_table(local_table)
            if local_table is not None
            else LocalServerConfig()
        )
        return cls(
            name=_optional_string(document, "name"),
            description=_optional_string(document, "description"),
            authors=_optional_strings(document, "authors"),
            language=_optional_string(document, "language"),
            local_server=local_server,
        )