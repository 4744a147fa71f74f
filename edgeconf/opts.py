"""Command-line options for the local testing daemon."""

from __future__ import annotations

import argparse
import ipaddress
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .errors import FileFormatError

_DEFAULT_ADDR = (ipaddress.IPv4Address("127.0.0.1"), 7878)
_ADDR_ERROR = "invalid IP address syntax"
_WASM_MAGIC = b"\0asm"

_MODULE_FIELDS = frozenset(
    {
        "type", "rec", "import", "func", "table", "memory", "global",
        "export", "start", "elem", "data", "tag",
    }
)


@dataclass(frozen=True)
class Options:
    """Parsed command-line options."""

    input: Path
    socket_addr: tuple[ipaddress.IPv4Address | ipaddress.IPv6Address, int] | None = None
    config_path: Path | None = None
    log_stdout: bool = False
    log_stderr: bool = False
    verbosity: int = 0

    def addr(self) -> tuple[ipaddress.IPv4Address | ipaddress.IPv6Address, int]:
        """The address to bind to, by default 127.0.0.1 port 7878."""
        return self.socket_addr if self.socket_addr is not None else _DEFAULT_ADDR


def _tokens(text: str):
    """Split WebAssembly text into parentheses and atoms, skipping comments."""
    pos, end = 0, len(text)
    while pos < end:
        ch = text[pos]
        if ch.isspace():
            pos += 1
        elif text.startswith(";;", pos):
            newline = text.find("\n", pos)
            pos = end if newline == -1 else newline + 1
        elif text.startswith("(;", pos):
            depth, pos = 1, pos + 2
            while depth:
                if pos >= end:
                    raise ValueError("unterminated block comment")
                if text.startswith("(;", pos):
                    depth, pos = depth + 1, pos + 2
                elif text.startswith(";)", pos):
                    depth, pos = depth - 1, pos + 2
                else:
                    pos += 1
        elif ch in "()":
            yield ch
            pos += 1
        elif ch == '"':
            start, pos = pos, pos + 1
            while True:
                if pos >= end:
                    raise ValueError("unterminated string")
                if text[pos] == "\\":
                    pos += 2
                elif text[pos] == '"':
                    pos += 1
                    break
                else:
                    pos += 1
            yield text[start:pos]
        else:
            start = pos
            while pos < end and not text[pos].isspace() and text[pos] not in '();"':
                pos += 1
            if pos == start:
                raise ValueError(f"unexpected character {ch!r}")
            yield text[start:pos]


def _parse_sexprs(text: str) -> list:
    stack: list[list] = [[]]
    for token in _tokens(text):
        if token == "(":
            stack.append([])
        elif token == ")":
            if len(stack) == 1:
                raise ValueError("unbalanced ')'")
            done = stack.pop()
            stack[-1].append(done)
        else:
            stack[-1].append(token)
    if len(stack) != 1:
        raise ValueError("unbalanced '('")
    return stack[0]


def _is_field(form) -> bool:
    return (
        isinstance(form, list)
        and bool(form)
        and isinstance(form[0], str)
        and form[0] in _MODULE_FIELDS
    )


def _check_wat(text: str) -> None:
    forms = _parse_sexprs(text)
    if len(forms) == 1 and isinstance(forms[0], list) and forms[0][:1] == ["module"]:
        rest = forms[0][1:]
        if rest and isinstance(rest[0], str) and rest[0].startswith("$"):
            rest = rest[1:]
        if rest and rest[0] in ("binary", "quote"):
            if not all(isinstance(item, str) and item.startswith('"') for item in rest[1:]):
                raise ValueError("expected strings")
            return
        forms = rest
    if not all(_is_field(form) for form in forms):
        raise ValueError("expected module fields")


def check_module(value: str | Path) -> Path:
    """Return the path if it names a Wasm module in binary or text form.

    Raises OSError if the file cannot be read and FileFormatError if its
    contents are not a module.
    """
    path = Path(value)
    contents = path.read_bytes()
    if contents.startswith(_WASM_MAGIC):
        return path
    try:
        _check_wat(contents.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        raise FileFormatError() from None
    return path


def _module_argument(value: str) -> Path:
    try:
        return check_module(value)
    except (OSError, FileFormatError) as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _socket_address(value: str):
    if value.startswith("["):
        host, sep, port = value[1:].partition("]:")
        if not sep:
            raise argparse.ArgumentTypeError(_ADDR_ERROR)
        parse = ipaddress.IPv6Address
    else:
        host, sep, port = value.rpartition(":")
        if not sep:
            raise argparse.ArgumentTypeError(_ADDR_ERROR)
        parse = ipaddress.IPv4Address
    if not (port.isascii() and port.isdigit()) or int(port) > 65535:
        raise argparse.ArgumentTypeError(_ADDR_ERROR)
    try:
        ip = parse(host)
    except ValueError:
        raise argparse.ArgumentTypeError(_ADDR_ERROR) from None
    return ip, int(port)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        raise argparse.ArgumentError(None, message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="edgeconf",
        description="A local testing daemon for edge compute services.",
    )
    parser.add_argument(
        "--addr",
        dest="socket_addr",
        type=_socket_address,
        help="The IP address that the service should be bound to.",
    )
    parser.add_argument(
        "input",
        type=_module_argument,
        help="The path to the service's Wasm module.",
    )
    parser.add_argument(
        "-C",
        "--config",
        dest="config_path",
        type=Path,
        help="The path to a TOML file containing `local_server` configuration.",
    )
    parser.add_argument(
        "--log-stdout",
        action="store_true",
        help="Whether to treat stdout as a logging endpoint",
    )
    parser.add_argument(
        "--log-stderr",
        action="store_true",
        help="Whether to treat stderr as a logging endpoint",
    )
    parser.add_argument(
        "-v",
        dest="verbosity",
        action="count",
        default=0,
        help="Verbosity of logs: -v for DEBUG, -vv for TRACE.",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Options:
    """Parse command-line arguments; raises argparse.ArgumentError on bad input."""
    namespace = _build_parser().parse_args(argv)
    return Options(
        input=namespace.input,
        socket_addr=namespace.socket_addr,
        config_path=namespace.config_path,
        log_stdout=namespace.log_stdout,
        log_stderr=namespace.log_stderr,
        verbosity=namespace.verbosity,
    )