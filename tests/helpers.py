import asyncio
import struct

from mc_legacy_ping.connection import Deadline, TCPConnection


class FakeWriter:
    def __init__(self):
        self.written = bytearray()
        self.close_calls = 0

    def write(self, data):
        self.written.extend(data)

    async def drain(self):
        pass

    def close(self):
        self.close_calls += 1

    async def wait_closed(self):
        pass


class BrokenWriter(FakeWriter):
    async def drain(self):
        raise ConnectionResetError("Connection reset by peer")


class CountingConnection(TCPConnection):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.destroy_calls = 0

    async def destroy(self):
        self.destroy_calls += 1
        await super().destroy()


def legacy_reply(text, packet_id=0xFF):
    payload = text.encode("utf-16-be")
    return bytes([packet_id]) + struct.pack(">H", len(payload) // 2) + payload


def scripted_connection(data, timeout_ms=1000, eof=True):
    """A real TCPConnection whose peer is a canned byte string."""
    reader = asyncio.StreamReader()
    if data:
        reader.feed_data(data)
    if eof:
        reader.feed_eof()
    return CountingConnection(reader, FakeWriter(), Deadline(timeout_ms))


class ScriptedServer:
    """Replaces TCPConnection.connect; hands out one scripted connection per call."""

    def __init__(self, data, eof=True):
        self.data = data
        self.eof = eof
        self.connects = []
        self.connections = []

    async def connect(self, host, port, timeout_ms=None, deadline=None):
        self.connects.append((host, port))
        connection = scripted_connection(self.data, eof=self.eof)
        if deadline is not None:
            connection.deadline = deadline
        self.connections.append(connection)
        return connection
