"""Named logging endpoints that write escaped, single-line entries."""

from __future__ import annotations

import sys
import threading
from typing import BinaryIO

_DELIMITER = b" :: "
_lock = threading.Lock()
_writer: BinaryIO | None = None


def set_log_writer(writer: BinaryIO | None) -> None:
    """Redirect every log entry to `writer`; None restores standard output."""
    global _writer
    with _lock:
        _writer = writer


def get_log_writer() -> BinaryIO:
    """The writer that log entries currently go to."""
    return _writer if _writer is not None else sys.stdout.buffer


class LogEndpoint:
    """A logging endpoint, identified only by its name."""

    def __init__(self, name: bytes | str) -> None:
        self.name = name.encode("utf-8") if isinstance(name, str) else bytes(name)

    def write_entry(self, msg: bytes) -> None:
        """Write one entry, prefixed by the endpoint name and ended by a newline.

        A single trailing newline is dropped, interior newlines are escaped as the
        two characters backslash and n, and an empty message writes nothing. The
        entry goes to the log writer in one write call.
        """
        msg = bytes(msg)
        if msg.endswith(b"\n"):
            msg = msg[:-1]
        if not msg:
            return
        entry = self.name + _DELIMITER + msg.replace(b"\n", b"\\n") + b"\n"
        with _lock:
            get_log_writer().write(entry)

    def write(self, buf: bytes) -> int:
        """Write `buf` as one entry and report the whole buffer as consumed."""
        self.write_entry(buf)
        return len(buf)

    def flush(self) -> None:
        """Flush the shared log writer."""
        with _lock:
            get_log_writer().flush()

    def __repr__(self) -> str:
        return f"LogEndpoint({self.name!r})"