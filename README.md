# edgeconf

Building blocks for a local edge-compute testing server: reading the
`fastly.toml` package manifest and its `local_server` section, validating
backend and dictionary definitions, canonicalising incoming requests,
assembling request and response bodies from chunks, writing log entries to
named logging endpoints, and parsing the server's command-line options.

Requires Python 3.11 or later and has no third-party dependencies.

## Reading a configuration

```python
from edgeconf.config import FastlyConfig
from edgeconf.errors import FastlyConfigError

try:
    config = FastlyConfig.from_file("fastly.toml")
except FastlyConfigError as err:
    print(f"bad configuration: {err}")
else:
    for name, backend in config.backends().items():
        print(name, backend.uri, backend.override_host)
    for name, dictionary in config.dictionaries().items():
        print(name, dictionary.file, dictionary.format)
```

A manifest looks like this:

```toml
name = "my-service"
description = "an example service"
authors = ["Someone <someone@example.com>"]
language = "rust"

[local_server.backends.origin]
url = "http://127.0.0.1:9000/"
override_host = "example.com"

[local_server.dictionaries.settings]
file = "settings.json"
format = "json"
```

Every top-level field is optional; missing strings become `""` and missing
`authors` an empty list. Keys in `local_server` other than `backends` and
`dictionaries` are ignored.

- A backend (`edgeconf.backends.Backend`) needs a `url` string that is a
  well-formed URI and may have a non-empty `override_host` that is a valid
  header value; any other key is rejected. `config.backends()` maps backend
  names to `Backend` objects.
- A dictionary (`edgeconf.dictionaries.Dictionary`) needs a `format` (only
  `json` is supported, `DictionaryFormat.JSON`) and a non-empty `file`. Its
  name must start with a letter and hold only letters, digits, underscores
  and whitespace; `config.dictionaries()` is keyed by `DictionaryName`.
  The file is read when the configuration is loaded and must contain a
  single JSON object of at most 1000 items, each value a string, with keys
  of at most 256 characters and values of at most 8000.
  `parse_dict_as_json(name, data)` performs that check on its own.

Problems are raised as subclasses of `edgeconf.errors.FastlyConfigError`:
`ConfigIoError` when the file cannot be read, `InvalidFastlyToml` for
malformed TOML or fields of the wrong type, and `InvalidBackendDefinition`
or `InvalidDictionaryDefinition` naming the entry at fault. The last two
carry, as `err`, a `BackendConfigError` or `DictionaryConfigError` whose
`kind` (a `BackendConfigErrorKind` or `DictionaryConfigErrorKind`) says
what went wrong. All errors derive from `edgeconf.errors.Error`.

`FastlyConfig.from_str` parses TOML text in the same way, and
`LocalServerConfig.from_table` validates an already-parsed `local_server`
table.

## Bodies

`edgeconf.body.Body` is a queue of chunks: byte strings, or a
`ChunkChannel` that can still be written to while the body is being read.
Pushing or appending another `Body` moves its chunks over.

```python
import asyncio
from edgeconf.body import Body, ChunkChannel

async def main():
    channel = ChunkChannel()
    body = Body(b"Hello, ")
    body.push_back(channel)
    print(body.size_hint())          # None while a channel is queued
    channel.send(b"world!")
    channel.close()
    print(await body.read_into_string())  # Hello, world!

asyncio.run(main())
```

`size_hint()` gives the exact length when only byte chunks are queued.
`async for` over a body yields its data and drains it, waiting on channels
until they are closed; plain iteration lists the chunks currently held
without consuming them. Sending to a closed channel raises `Error`.

## Requests and headers

`edgeconf.downstream.prepare_request` takes a `Request` (method, uri,
headers, body) and returns a copy with an absolute URI whose authority is
the `Host` header when present, or else the host of the URI's authority;
the scheme defaults to `http` and the body becomes a `Body`. A missing or
undecodable host raises `DownstreamRequestError` with
`DownstreamRequestError.INVALID_HOST`; a missing path or an invalid host
raises it with `DownstreamRequestError.INVALID_URL`.

`edgeconf.headers.filter_outgoing_headers` removes `Content-Length` and
`Transfer-Encoding` (in any letter case) from a header mapping in place.

## Logging endpoints

```python
import io
from edgeconf.logendpoint import LogEndpoint, set_log_writer

sink = io.BytesIO()
set_log_writer(sink)
LogEndpoint(b"inigo").write_entry(b"Who are you?\n")
print(sink.getvalue())  # b"inigo :: Who are you?\n"
```

One trailing newline is dropped, interior newlines are escaped as `\n`,
and empty messages are not written. `LogEndpoint.write` does the same and
returns the length of the buffer. Entries go to standard output unless
`set_log_writer` is given a writer; `set_log_writer(None)` restores
standard output and `get_log_writer()` returns the current writer.

## Command-line options

`edgeconf.opts.parse_args(argv)` parses the server's arguments into an
`Options` object: the path to a Wasm module (checked to exist and to be in
binary or text format by `check_module`), an optional `--addr` (IPv4
`host:port` or IPv6 `[host]:port`), `-C/--config`, `--log-stdout`,
`--log-stderr` and a repeatable `-v`. Bad arguments raise
`argparse.ArgumentError`. `Options.addr()` returns an `(ip, port)` pair,
by default `127.0.0.1` port `7878`.

```python
from edgeconf.opts import parse_args

options = parse_args(["service.wasm", "--addr", "[::1]:7878"])
print(options.addr())
```

## What this package does not do

It does not run Wasm modules, serve HTTP, contact backends or look up
dictionary items, and it installs no command. It supplies the
configuration, option parsing, request, body, header and logging pieces
that such a server is built from.