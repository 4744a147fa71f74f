"""Canonicalization of the incoming client request."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .body import Body
from .errors import DownstreamRequestError

_ABSOLUTE = re.compile(r"([A-Za-z][A-Za-z0-9+.\-]*)://([^/?#]*)(.*)", re.DOTALL)
_AUTHORITY_CHARS = re.compile(r"[A-Za-z0-9\-._~!$&'()*+,;=:@\[\]%]+")


@dataclass
class Request:
    """An HTTP request: method, target URI, headers and body."""

    method: str = "GET"
    uri: str = "/"
    headers: Mapping[str, Any] = field(default_factory=dict)
    body: Any = b""


def _header(headers: Mapping[str, Any], name: str) -> Any:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _split_uri(uri: str) -> tuple[str | None, str | None, str | None]:
    """Split a request target into scheme, authority and path-and-query."""
    if uri.startswith("/"):
        return None, None, uri.partition("#")[0]
    match = _ABSOLUTE.fullmatch(uri)
    if match:
        scheme, authority, rest = match.groups()
        rest = rest.partition("#")[0]
        if not rest.startswith("/"):
            rest = "/" + rest
        return scheme.lower(), authority or None, rest
    return None, uri or None, None


def _authority_host(authority: str) -> str:
    hostport = authority.rpartition("@")[2]
    if hostport.startswith("["):
        end = hostport.find("]")
        return hostport if end == -1 else hostport[: end + 1]
    return hostport.partition(":")[0]


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
        host, sep, port = hostport.partition(":")
        rest = sep + port
    if rest:
        if not rest.startswith(":"):
            return False
        port = rest[1:]
        if port and not (port.isascii() and port.isdigit()):
            return False
    return True


def prepare_request(request: Request) -> Request:
    """Give the request an absolute URI whose authority is the request's host.

    The Host header wins over the URI's authority; the scheme defaults to http.
    """
    scheme, authority, path_and_query = _split_uri(request.uri)

    host_header = _header(request.headers, "host")
    if host_header is not None:
        if isinstance(host_header, (bytes, bytearray)):
            try:
                host = bytes(host_header).decode("utf-8")
            except UnicodeDecodeError:
                raise DownstreamRequestError(DownstreamRequestError.INVALID_HOST) from None
        else:
            host = str(host_header)
    elif authority is not None:
        host = _authority_host(authority)
    else:
        raise DownstreamRequestError(DownstreamRequestError.INVALID_HOST)

    if path_and_query is None:
        raise DownstreamRequestError(DownstreamRequestError.INVALID_URL)
    if not _valid_authority(host):
        raise DownstreamRequestError(DownstreamRequestError.INVALID_URL)

    uri = f"{scheme or 'http'}://{host}{path_and_query}"
    body = request.body if isinstance(request.body, Body) else Body(request.body)
    return dataclasses.replace(request, uri=uri, headers=dict(request.headers), body=body)