"""Backend definitions from the `local_server.backends` table."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import BackendConfigError, BackendConfigErrorKind, InvalidBackendDefinition

_URI_CHARS = re.compile(r"[A-Za-z0-9\-._~!$&'()*+,;=:@/?#\[\]%]+")
_AUTHORITY_CHARS = re.compile(r"[A-Za-z0-9\-._~!$&'()*+,;=:@\[\]%]+")
_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")


def _valid_authority(authority: str) -> bool:
    if not _AUTHORITY_CHARS.fullmatch(authority):
        return False
    hostport = authority.rpartition("@")[2]
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            return False
        rest = hostport[end + 1 :]
    else:
        if "[" in hostport or "]" in hostport:
            return False
        _, sep, port = hostport.partition(":")
        rest = sep + port
    if rest:
        if not rest.startswith(":"):
            return False
        port = rest[1:]
        if port and not (port.isascii() and port.isdigit()):
            return False
    return True


def _check_uri(text: str) -> None:
    """Raise ValueError unless `text` is a well-formed URI."""
    if not text:
        raise ValueError("empty string")
    if not _URI_CHARS.fullmatch(text):
        raise ValueError("invalid uri character")
    if text.startswith("/") or text == "*":
        return
    scheme, sep, rest = text.partition("://")
    if sep:
        if not _SCHEME.fullmatch(scheme):
            raise ValueError("invalid scheme")
        authority = re.match(r"[^/?#]*", rest).group()
        if not _valid_authority(authority):
            raise ValueError("invalid authority")
        return
    if not _valid_authority(text):
        raise ValueError("invalid format")


def _valid_header_value(text: str) -> bool:
    return all(ch == "\t" or (ord(ch) >= 32 and ord(ch) != 127) for ch in text)


@dataclass(frozen=True)
class Backend:
    """A single backend: where requests go, and an optional Host override."""

    uri: str
    override_host: str | None = None

    @classmethod
    def from_table(cls, table: Mapping[str, Any]) -> "Backend":
        """Validate one backend's TOML table."""
        remaining = dict(table)

        if "url" not in remaining:
            raise BackendConfigError(BackendConfigErrorKind.MISSING_URL)
        url = remaining.pop("url")
        if not isinstance(url, str):
            raise BackendConfigError(BackendConfigErrorKind.INVALID_URL_ENTRY)
        try:
            _check_uri(url)
        except ValueError as exc:
            raise BackendConfigError(BackendConfigErrorKind.INVALID_URL, str(exc)) from exc

        override_host = None
        if "override_host" in remaining:
            value = remaining.pop("override_host")
            if not isinstance(value, str):
                raise BackendConfigError(BackendConfigErrorKind.INVALID_OVERRIDE_HOST_ENTRY)
            if not value.strip():
                raise BackendConfigError(BackendConfigErrorKind.EMPTY_OVERRIDE_HOST)
            if not _valid_header_value(value):
                raise BackendConfigError(
                    BackendConfigErrorKind.INVALID_OVERRIDE_HOST,
                    "failed to parse header value",
                )
            override_host = value

        if remaining:
            raise BackendConfigError(BackendConfigErrorKind.UNRECOGNIZED_KEY, min(remaining))

        return cls(uri=url, override_host=override_host)


def parse_backends(table: Mapping[str, Any]) -> dict[str, Backend]:
    """Validate every backend definition, keyed by backend name."""
    backends: dict[str, Backend] = {}
    for name in sorted(table):
        definition = table[name]
        try:
            if not isinstance(definition, Mapping):
                raise BackendConfigError(BackendConfigErrorKind.INVALID_ENTRY_TYPE)
            backends[name] = Backend.from_table(definition)
        except BackendConfigError as err:
            raise InvalidBackendDefinition(name, err) from err
    return backends