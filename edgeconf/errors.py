"""Error types raised while loading configuration and handling requests."""

from __future__ import annotations

import enum
import string
from typing import Any


class Error(Exception):
    """Base class for every error raised by this package."""


class FileFormatError(Error):
    """The given file is not a valid Wasm module."""

    def __init__(self) -> None:
        super().__init__("Expected a valid Wasm file")


def _placeholders(template: str) -> set[str]:
    return {field for _, field, _, _ in string.Formatter().parse(template) if field}


def _render(template: str, values: dict[str, Any], kind: enum.Enum) -> str:
    missing = _placeholders(template) - values.keys()
    if missing:
        raise TypeError(f"{kind} requires: {', '.join(sorted(missing))}")
    return template.format(**values)


class BackendConfigErrorKind(enum.Enum):
    """The ways a backend definition can be invalid."""

    INVALID_ENTRY_TYPE = "definition was not provided as a TOML table"
    INVALID_OVERRIDE_HOST = "invalid override_host: {detail}"
    EMPTY_OVERRIDE_HOST = "'override_host' field is empty"
    INVALID_OVERRIDE_HOST_ENTRY = "'override_host' field was not a string"
    INVALID_URL = "invalid url: {detail}"
    INVALID_URL_ENTRY = "'url' field was not a string"
    MISSING_DEFAULT = "no default definition provided"
    MISSING_URL = "missing 'url' field"
    UNRECOGNIZED_KEY = "unrecognized key '{detail}'"


class BackendConfigError(Error):
    """A single backend definition failed validation."""

    def __init__(self, kind: BackendConfigErrorKind, detail: Any = None) -> None:
        values = {} if detail is None else {"detail": detail}
        message = _render(kind.value, values, kind)
        self.kind = kind
        self.detail = detail
        super().__init__(message)


class DictionaryConfigErrorKind(enum.Enum):
    """The ways a dictionary definition can be invalid."""

    IO_ERROR = "error reading `{name}`: {error}"
    INVALID_ENTRY_TYPE = "definition was not provided as a TOML table"
    INVALID_NAME = "invalid string: {name}"
    INVALID_NAME_ENTRY = "'name' field was not a string"
    INVALID_DICTIONARY_FILE_FORMAT = (
        "'{format}' is not a valid format for the dictionary file. "
        "Supported format(s) are: JSON."
    )
    EMPTY_FILE_ENTRY = "'file' field is empty"
    EMPTY_FORMAT_ENTRY = "'format' field is empty"
    INVALID_FILE_ENTRY = "'file' field was not a string"
    INVALID_FORMAT_ENTRY = "'format' field was not a string"
    MISSING_DEFAULT = "no default definition provided"
    MISSING_NAME = "missing 'name' field"
    MISSING_FILE = "missing 'file' field"
    MISSING_FORMAT = "missing 'format' field"
    UNRECOGNIZED_KEY = "unrecognized key '{key}'"
    ITEM_KEY_TOO_LONG = (
        "Item key named '{key}' in dictionary named '{name}' is too long, "
        "max size is {size}"
    )
    COUNT_TOO_LONG = (
        "The dictionary named '{name}' has too many items, max amount is {size}"
    )
    ITEM_VALUE_WRONG_FORMAT = (
        "Item value under key named '{key}' in dictionary named '{name}' is of the "
        "wrong format. The value is expected to be a JSON String"
    )
    ITEM_VALUE_TOO_LONG = (
        "Item value named '{key}' in dictionary named '{name}' is too long, "
        "max size is {size}"
    )
    FILE_WRONG_FORMAT = (
        "The file for the dictionary named '{name}' is of the wrong format. "
        "The file is expected to contain a single JSON Object"
    )


class DictionaryConfigError(Error):
    """A single dictionary definition failed validation."""

    def __init__(self, kind: DictionaryConfigErrorKind, **fields: Any) -> None:
        message = _render(kind.value, fields, kind)
        self.kind = kind
        self.fields = dict(fields)
        super().__init__(message)


class FastlyConfigError(Error):
    """Base class for errors while reading a `fastly.toml` file."""


class ConfigIoError(FastlyConfigError):
    """The configuration file could not be read."""

    def __init__(self, path: Any, err: OSError) -> None:
        self.path = str(path)
        self.err = err
        super().__init__(f"error reading '{self.path}': {err}")
        self.__cause__ = err


class InvalidBackendDefinition(FastlyConfigError):
    """A named backend definition is invalid."""

    def __init__(self, name: str, err: BackendConfigError) -> None:
        self.name = name
        self.err = err
        super().__init__(f"invalid configuration for '{name}': {err}")
        self.__cause__ = err


class InvalidDictionaryDefinition(FastlyConfigError):
    """A named dictionary definition is invalid."""

    def __init__(self, name: str, err: DictionaryConfigError) -> None:
        self.name = name
        self.err = err
        super().__init__(f"invalid configuration for '{name}': {err}")
        self.__cause__ = err


class InvalidFastlyToml(FastlyConfigError):
    """The configuration file is not valid TOML or has the wrong shape."""

    def __init__(self, err: Any) -> None:
        self.err = err
        super().__init__(f"error parsing `fastly.toml`: {err}")
        if isinstance(err, BaseException):
            self.__cause__ = err


class DownstreamRequestError(Error):
    """The incoming client request could not be canonicalized."""

    INVALID_HOST = "Request HOST header is missing or invalid"
    INVALID_URL = "Request URL is invalid"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)