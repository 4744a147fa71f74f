"""Dictionary definitions from the `local_server.dictionaries` table."""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import (
    DictionaryConfigError,
    DictionaryConfigErrorKind,
    InvalidDictionaryDefinition,
)

DICTIONARY_MAX_LEN = 1000
DICTIONARY_ITEM_KEY_MAX_LEN = 256
DICTIONARY_ITEM_VALUE_MAX_LEN = 8000


@dataclass(frozen=True)
class DictionaryName:
    """The name a dictionary is looked up by."""

    value: str

    @classmethod
    def parse(cls, name: str) -> "DictionaryName":
        """Accept a name that starts with a letter and holds only letters,
        digits, underscores and whitespace."""
        if (
            name
            and name[0].isalpha()
            and all(ch.isalnum() or ch == "_" or ch.isspace() for ch in name)
        ):
            return cls(name)
        raise DictionaryConfigError(DictionaryConfigErrorKind.INVALID_NAME, name=name)

    def __str__(self) -> str:
        return self.value


class DictionaryFormat(enum.Enum):
    """The file formats a dictionary can be stored in."""

    JSON = "json"

    @classmethod
    def parse(cls, name: str) -> "DictionaryFormat":
        if not name:
            raise DictionaryConfigError(DictionaryConfigErrorKind.EMPTY_FORMAT_ENTRY)
        if name == "json":
            return cls.JSON
        raise DictionaryConfigError(
            DictionaryConfigErrorKind.INVALID_DICTIONARY_FILE_FORMAT, format=name
        )


@dataclass(frozen=True)
class Dictionary:
    """A dictionary definition: the file holding it and its format."""

    file: Path
    format: DictionaryFormat


def _reject_constant(token: str) -> Any:
    raise ValueError(f"invalid JSON constant {token}")


def parse_dict_as_json(name: str, data: str) -> dict[str, str]:
    """Check that `data` is a JSON object within the dictionary limits and return it."""
    try:
        parsed = json.loads(data, parse_constant=_reject_constant)
    except ValueError:
        raise DictionaryConfigError(
            DictionaryConfigErrorKind.FILE_WRONG_FORMAT, name=name
        ) from None
    if not isinstance(parsed, dict):
        raise DictionaryConfigError(DictionaryConfigErrorKind.FILE_WRONG_FORMAT, name=name)
    if len(parsed) > DICTIONARY_MAX_LEN:
        raise DictionaryConfigError(
            DictionaryConfigErrorKind.COUNT_TOO_LONG, name=name, size=DICTIONARY_MAX_LEN
        )
    for key in sorted(parsed):
        value = parsed[key]
        if len(key) > DICTIONARY_ITEM_KEY_MAX_LEN:
            raise DictionaryConfigError(
                DictionaryConfigErrorKind.ITEM_KEY_TOO_LONG,
                name=name,
                key=key,
                size=DICTIONARY_ITEM_KEY_MAX_LEN,
            )
        if not isinstance(value, str):
            raise DictionaryConfigError(
                DictionaryConfigErrorKind.ITEM_VALUE_WRONG_FORMAT, name=name, key=key
            )
        if len(value) > DICTIONARY_ITEM_VALUE_MAX_LEN:
            raise DictionaryConfigError(
                DictionaryConfigErrorKind.ITEM_VALUE_TOO_LONG,
                name=name,
                key=key,
                size=DICTIONARY_ITEM_VALUE_MAX_LEN,
            )
    return parsed


def _parse_entry(name: str, definition: Any) -> tuple[DictionaryName, Dictionary]:
    if not isinstance(definition, Mapping):
        raise DictionaryConfigError(DictionaryConfigErrorKind.INVALID_ENTRY_TYPE)
    remaining = dict(definition)

    if "format" not in remaining:
        raise DictionaryConfigError(DictionaryConfigErrorKind.MISSING_FORMAT)
    raw_format = remaining.pop("format")
    if not isinstance(raw_format, str):
        raise DictionaryConfigError(DictionaryConfigErrorKind.INVALID_FORMAT_ENTRY)
    fmt = DictionaryFormat.parse(raw_format)

    if "file" not in remaining:
        raise DictionaryConfigError(DictionaryConfigErrorKind.MISSING_FILE)
    raw_file = remaining.pop("file")
    if not isinstance(raw_file, str):
        raise DictionaryConfigError(DictionaryConfigErrorKind.INVALID_FILE_ENTRY)
    if not raw_file:
        raise DictionaryConfigError(DictionaryConfigErrorKind.EMPTY_FILE_ENTRY)
    file = Path(raw_file)

    if remaining:
        raise DictionaryConfigError(
            DictionaryConfigErrorKind.UNRECOGNIZED_KEY, key=min(remaining)
        )

    try:
        data = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DictionaryConfigError(
            DictionaryConfigErrorKind.IO_ERROR, name=name, error=str(exc)
        ) from exc

    if fmt is DictionaryFormat.JSON:
        parse_dict_as_json(name, data)

    return DictionaryName.parse(name), Dictionary(file=file, format=fmt)


def parse_dictionaries(table: Mapping[str, Any]) -> dict[DictionaryName, Dictionary]:
    """Validate every dictionary definition, including the file each one names."""
    dictionaries: dict[DictionaryName, Dictionary] = {}
    for name in sorted(table):
        try:
            key, dictionary = _parse_entry(name, table[name])
        except DictionaryConfigError as err:
            raise InvalidDictionaryDefinition(name, err) from err
        dictionaries[key] = dictionary
    return dictionaries