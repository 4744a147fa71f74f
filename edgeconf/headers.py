"""Header filtering for outgoing messages."""

from __future__ import annotations

from collections.abc import MutableMapping

_FRAMING_HEADERS = frozenset({"content-length", "transfer-encoding"})


def filter_outgoing_headers(headers: MutableMapping) -> None:
    """Remove framing headers; the HTTP layer supplies its own."""
    for name in list(headers.keys()):
        if name.lower() in _FRAMING_HEADERS and name in headers:
            del headers[name]