import asyncio
import socket

import pytest

from mc_legacy_ping.connection import Deadline, TCPConnection
from mc_legacy_ping.errors import ServerConnectionError, ServerTimeoutError

from .helpers import BrokenWriter, legacy_reply, scripted_connection


@pytest.fixture
async def local_server():
    """Start a localhost server with the given connection handler."""
    servers = []

    async def start(handler):
        server = await asyncio.start_server(handler, "127.0.0.1", 0)
        servers.append(server)
        return server.sockets[0].getsockname()[1]

    yield start

    for server in servers:
        server.close()
        await server.wait_closed()


def unused_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestDeadline:
    async def test_remaining_counts_down(self):
        deadline = Deadline(1000)
        assert 0 < deadline.remaining() <= 1.0
        assert not deadline.expired

    async def test_expires(self):
        deadline = Deadline(1)
        await asyncio.sleep(0.01)
        assert deadline.remaining() == 0
        assert deadline.expired


class TestTCPConnection:
    async def test_legacy_exchange_over_real_socket(self, local_server):
        received = []

        async def handler(reader, writer):
            received.append(await reader.readexactly(1))
            writer.write(legacy_reply("Hi§§1§§2"))
            await writer.drain()
            writer.close()

        port = await local_server(handler)
        connection = await TCPConnection.connect("127.0.0.1", port, 2000)
        async with connection:
            await connection.write_frame(b"\xfe", prefix_length=False)
            assert await connection.read_byte() == 0xFF
            length = await connection.read_short()
            assert length == 8
            text = (await connection.read_bytes(length * 2)).decode("utf-16-be")
        assert text == "Hi§§1§§2"
        assert received == [b"\xfe"]
        assert connection.destroyed

    async def test_connection_refused(self):
        with pytest.raises(ServerConnectionError):
            await TCPConnection.connect("127.0.0.1", unused_port(), 2000)

    async def test_read_timeout_on_silent_server(self, local_server):
        async def handler(reader, writer):
            # 不回复，直到客户端断开
            await reader.read()
            writer.close()

        port = await local_server(handler)
        connection = await TCPConnection.connect("127.0.0.1", port, 100)
        async with connection:
            with pytest.raises(ServerTimeoutError):
                await connection.read_byte()

    async def test_read_after_peer_closed(self, local_server):
        async def handler(reader, writer):
            writer.write(b"\xff")
            await writer.drain()
            writer.close()

        port = await local_server(handler)
        connection = await TCPConnection.connect("127.0.0.1", port, 2000)
        async with connection:
            assert await connection.read_byte() == 0xFF
            with pytest.raises(ServerConnectionError, match="Connection closed"):
                await connection.read_short()

    async def test_read_short_is_big_endian(self):
        connection = scripted_connection(b"\x01\x02")
        assert await connection.read_short() == 0x0102

    async def test_write_frame_with_length_prefix(self):
        connection = scripted_connection(b"")
        await connection.write_frame(b"abc")
        await connection.write_frame(bytes(200))
        assert bytes(connection.writer.written) == b"\x03abc" + b"\xc8\x01" + bytes(200)

    async def test_write_frame_without_prefix(self):
        connection = scripted_connection(b"")
        await connection.write_frame(b"\xfe", prefix_length=False)
        assert bytes(connection.writer.written) == b"\xfe"

    async def test_destroy_is_idempotent(self):
        connection = scripted_connection(b"")
        await connection.destroy()
        await connection.destroy()
        assert connection.writer.close_calls == 1

    async def test_context_manager_destroys_on_error(self):
        connection = scripted_connection(b"")
        with pytest.raises(RuntimeError):
            async with connection:
                raise RuntimeError("boom")
        assert connection.destroy_calls == 1
        assert connection.writer.close_calls == 1

    async def test_connect_timeout(self, monkeypatch):
        async def hang(host, port):
            await asyncio.sleep(10)

        monkeypatch.setattr(asyncio, "open_connection", hang)
        with pytest.raises(ServerTimeoutError, match="while connecting"):
            await TCPConnection.connect("127.0.0.1", 25565, 50)

    async def test_connect_with_expired_deadline(self, monkeypatch):
        async def must_not_connect(host, port):
            raise AssertionError("open_connection called after the deadline")

        monkeypatch.setattr(asyncio, "open_connection", must_not_connect)
        deadline = Deadline(1)
        await asyncio.sleep(0.01)
        with pytest.raises(ServerTimeoutError, match="before connecting"):
            await TCPConnection.connect("127.0.0.1", 25565, deadline=deadline)

    async def test_read_with_expired_deadline_fails_fast(self):
        connection = scripted_connection(b"\xff", timeout_ms=1)
        await asyncio.sleep(0.01)
        with pytest.raises(ServerTimeoutError, match="before reading"):
            await connection.read_byte()

    async def test_write_failure(self):
        connection = scripted_connection(b"")
        connection.writer = BrokenWriter()
        with pytest.raises(ServerConnectionError, match="Failed to write"):
            await connection.write_frame(b"\xfe", prefix_length=False)
