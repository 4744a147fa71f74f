import asyncio

import pytest

from edgeconf.body import Body, ChunkChannel
from edgeconf.errors import Error


@pytest.mark.asyncio
async def test_bodies_can_be_written_and_appended():
    body = Body(b"Hello, ")
    body.push_back(b"Viceroy!")
    assert await body.read_into_string() == "Hello, Viceroy!"


@pytest.mark.asyncio
async def test_push_front_puts_chunk_first():
    body = Body(b"Viceroy!")
    body.push_front(b"Hello, ")
    assert await body.read_into_bytes() == b"Hello, Viceroy!"


@pytest.mark.asyncio
async def test_append_moves_chunks():
    first = Body(b"Hello, ")
    second = Body(b"Viceroy!")
    first.append(second)
    assert second.size_hint() == 0
    assert list(second) == []
    assert await first.read_into_string() == "Hello, Viceroy!"


def test_append_to_itself_is_rejected():
    body = Body(b"x")
    with pytest.raises(ValueError):
        body.append(body)


def test_size_hint_is_exact_for_plain_chunks():
    parts = [b"Hello, ", bytearray(b"Vice"), memoryview(b"roy!")]
    body = Body(*parts)
    assert body.size_hint() == len(b"Hello, Viceroy!")


def test_size_hint_unknown_with_channel():
    body = Body(b"abc", ChunkChannel())
    assert body.size_hint() is None


@pytest.mark.asyncio
async def test_empty_body():
    body = Body()
    assert body.size_hint() == 0
    assert await body.read_into_bytes() == b""


def test_iter_yields_chunks_without_consuming():
    channel = ChunkChannel()
    body = Body(b"a", channel, bytearray(b"b"))
    assert list(body) == [b"a", channel, b"b"]
    assert list(body) == [b"a", channel, b"b"]


def test_unsupported_chunk_type_raises():
    with pytest.raises(TypeError):
        Body("text")


@pytest.mark.asyncio
async def test_empty_chunks_are_skipped_when_reading():
    body = Body(b"", b"a", b"", b"b")
    pieces = [piece async for piece in body]
    assert pieces == [b"a", b"b"]


@pytest.mark.asyncio
async def test_streamed_lines_arrive_in_order():
    channel = ChunkChannel()
    body = Body(channel)
    for i in range(1000):
        channel.send(f"{i}\n".encode())
    channel.close()
    lines = (await body.read_into_string()).splitlines()
    assert lines == [str(i) for i in range(1000)]


@pytest.mark.asyncio
async def test_reader_waits_for_concurrent_writer():
    channel = ChunkChannel()
    body = Body(b"start-", channel, b"-end")

    async def produce():
        for piece in (b"a", b"b", b"c"):
            await asyncio.sleep(0)
            channel.send(piece)
        channel.close()

    producer = asyncio.create_task(produce())
    data = await body.read_into_bytes()
    await producer
    assert data == b"start-abc-end"


@pytest.mark.asyncio
async def test_nested_channels_are_flattened():
    outer = ChunkChannel()
    inner = ChunkChannel()
    body = Body(outer)
    outer.send(b"1")
    outer.send(inner)
    outer.send(b"4")
    outer.close()
    inner.send(b"2")
    inner.send(Body(b"3"))
    inner.close()
    assert await body.read_into_bytes() == b"1234"


def test_send_after_close_raises():
    channel = ChunkChannel()
    channel.close()
    assert channel.closed
    with pytest.raises(Error):
        channel.send(b"late")


@pytest.mark.asyncio
async def test_read_into_string_rejects_invalid_utf8():
    body = Body(b"\xff\xfe")
    with pytest.raises(UnicodeDecodeError):
        await body.read_into_string()


@pytest.mark.asyncio
async def test_reading_drains_the_body():
    body = Body(b"abc")
    assert await body.read_into_bytes() == b"abc"
    assert await body.read_into_bytes() == b""