"""Request and response bodies built from a queue of chunks."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Iterator
from typing import Union

from .errors import Error

_CLOSED = object()

Chunk = Union[bytes, "ChunkChannel"]


class ChunkChannel:
    """A stream of chunks that may still be written after the body is handed on.

    Reading a body that holds a channel waits for chunks until the channel is closed.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._finished = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, chunk) -> None:
        """Queue a chunk (bytes, another channel, or a body) for readers."""
        if self._closed:
            raise Error("Unexpected error sending a chunk to a streaming body")
        if isinstance(chunk, Body):
            pieces = list(chunk._chunks)
            chunk._chunks.clear()
        else:
            pieces = [_to_chunk(chunk)]
        for piece in pieces:
            self._queue.put_nowait(piece)

    def close(self) -> None:
        """Mark the end of the stream; already queued chunks can still be read."""
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    async def _recv(self):
        if self._finished:
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            self._finished = True
            return None
        return item

    def __repr__(self) -> str:
        return f"ChunkChannel(closed={self._closed})"


def _to_chunk(chunk) -> Chunk:
    if isinstance(chunk, ChunkChannel):
        return chunk
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    raise TypeError(f"cannot use {type(chunk).__name__} as a body chunk")


class Body:
    """An HTTP body: a queue of byte chunks and streaming channels."""

    def __init__(self, *chunks) -> None:
        self._chunks: deque[Chunk] = deque()
        for chunk in chunks:
            self.push_back(chunk)

    def push_back(self, chunk) -> None:
        """Add a chunk at the end of the body."""
        if isinstance(chunk, Body):
            self.append(chunk)
        else:
            self._chunks.append(_to_chunk(chunk))

    def push_front(self, chunk) -> None:
        """Add a chunk at the start of the body."""
        if isinstance(chunk, Body):
            if chunk is self:
                raise ValueError("a body cannot be pushed onto itself")
            self._chunks.extendleft(reversed(chunk._chunks))
            chunk._chunks.clear()
        else:
            self._chunks.appendleft(_to_chunk(chunk))

    def append(self, body: "Body") -> None:
        """Move every chunk of another body onto the end of this one."""
        if body is self:
            raise ValueError("a body cannot be appended to itself")
        self._chunks.extend(body._chunks)
        body._chunks.clear()

    def size_hint(self) -> int | None:
        """The exact length in bytes, or None when a streaming chunk is present."""
        total = 0
        for chunk in self._chunks:
            if isinstance(chunk, ChunkChannel):
                return None
            total += len(chunk)
        return total

    async def read_into_bytes(self) -> bytes:
        """Read the whole body, waiting on streaming chunks as needed."""
        return b"".join([piece async for piece in self])

    async def read_into_string(self) -> str:
        """Read the whole body as UTF-8 text."""
        return (await self.read_into_bytes()).decode("utf-8")

    async def __aiter__(self) -> AsyncIterator[bytes]:
        """Yield the body's data, draining it as it goes."""
        while self._chunks:
            chunk = self._chunks.popleft()
            if isinstance(chunk, ChunkChannel):
                item = await chunk._recv()
                if item is None:
                    continue
                self._chunks.appendleft(chunk)
                self._chunks.appendleft(item)
                continue
            if chunk:
                yield chunk

    def __iter__(self) -> Iterator[Chunk]:
        """Iterate over the chunks currently held, without consuming them."""
        return iter(list(self._chunks))

    def __repr__(self) -> str:
        return f"Body({list(self._chunks)!r})"