import asyncio
import logging
import struct
import time

from . import utils
from .errors import ServerConnectionError, ServerTimeoutError

logger = logging.getLogger(__name__)


class Deadline:
    """A single overall deadline, started on construction."""

    def __init__(self, timeout_ms):
        self.timeout_ms = timeout_ms
        self.expires_at = time.monotonic() + timeout_ms / 1000

    def remaining(self):
        """Seconds left, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self):
        return self.remaining() <= 0


class TCPConnection:
    """One outbound TCP stream bound to a deadline.

    Every read and write waits at most until the deadline given at connect
    time. ``destroy()`` may be called any number of times; use the connection
    as an async context manager so it always runs.
    """

    def __init__(self, reader, writer, deadline):
        self.reader = reader
        self.writer = writer
        self.deadline = deadline
        self.destroyed = False

    @classmethod
    async def connect(cls, host, port, timeout_ms=None, deadline=None):
        if deadline is None:
            deadline = Deadline(timeout_ms)
        if deadline.expired:
            raise ServerTimeoutError(
                f"Timed out after {deadline.timeout_ms}ms before connecting to {host}:{port}"
            )
        logger.debug(f"正在连接到 {host}:{port}")
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), deadline.remaining()
            )
        except asyncio.TimeoutError as e:
            raise ServerTimeoutError(
                f"Timed out after {deadline.timeout_ms}ms while connecting to {host}:{port}"
            ) from e
        except OSError as e:
            raise ServerConnectionError(f"Failed to connect to {host}:{port}: {e}") from e
        return cls(reader, writer, deadline)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.destroy()

    async def _wait(self, awaitable, action):
        if self.deadline.expired:
            awaitable.close()
            raise ServerTimeoutError(
                f"Timed out after {self.deadline.timeout_ms}ms before {action}"
            )
        try:
            return await asyncio.wait_for(awaitable, self.deadline.remaining())
        except asyncio.TimeoutError as e:
            raise ServerTimeoutError(
                f"Timed out after {self.deadline.timeout_ms}ms while {action}"
            ) from e

    async def read_bytes(self, n):
        """读取确切的n字节"""
        try:
            return await self._wait(self.reader.readexactly(n), f"reading {n} byte(s)")
        except asyncio.IncompleteReadError as e:
            raise ServerConnectionError(
                f"Connection closed after {len(e.partial)} of {n} byte(s)"
            ) from e
        except ConnectionError as e:
            raise ServerConnectionError(f"Connection lost while reading: {e}") from e

    async def read_byte(self):
        data = await self.read_bytes(1)
        return data[0]

    async def read_short(self):
        data = await self.read_bytes(2)
        return struct.unpack('>H', data)[0]

    async def write_frame(self, data, prefix_length=True):
        packet = bytes(data)
        if prefix_length:
            packet = utils.pack_varint(len(packet)) + packet
        await self._wait(self._send(packet), f"writing {len(packet)} byte(s)")

    async def _send(self, packet):
        try:
            self.writer.write(packet)
            await self.writer.drain()
        except ConnectionError as e:
            raise ServerConnectionError(f"Failed to write to server: {e}") from e

    async def destroy(self):
        if self.destroyed:
            return
        self.destroyed = True
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            # 对端已经断开，关闭时的错误不影响结果
            logger.debug(f"关闭连接时出错: {e}")
