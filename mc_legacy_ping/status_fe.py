"""Server List Ping in the Beta 1.8 - 1.3.2 format.

The client sends a single ``0xFE`` byte. The server answers with a kick
packet (``0xFF``), a big-endian ``uint16`` length counted in UTF-16 code
units, and that many UTF-16BE code units of text::

    <motd>§§<online players>§§<max players>

Real servers of that era separate the fields with a single section sign;
both forms are accepted.
"""

import asyncio
import logging
import re
import time
from dataclasses import dataclass

from . import config
from . import utils
from .connection import Deadline, TCPConnection
from .errors import ProtocolError, ValidationError
from .options import apply_default_options
from .response import format_result
from .srv import resolve_srv

logger = logging.getLogger(__name__)

# 从右侧截取两个数字字段，剩下的全部算作 MOTD（MOTD 里可能有 § 格式代码）
# 分隔符是 "§§" 或单独的 "§"，一对 § 不能被拆成两个分隔符
SEPARATOR = "(?:{0}{0}|{0}(?!{0}))".format(config.SECTION_SIGN)
COUNTS_TAIL_RE = re.compile(
    "{0}([^{1}]+){0}([^{1}]+)\\Z".format(SEPARATOR, config.SECTION_SIGN)
)
DECIMAL_RE = re.compile(r"[0-9]+", re.ASCII)


@dataclass(frozen=True)
class RawPingReply:
    motd: str
    online_players: int
    max_players: int


def _parse_count(text, description, field):
    if DECIMAL_RE.fullmatch(text) is None or int(text) > config.MAX_PLAYER_COUNT:
        raise ProtocolError(f"Server returned an invalid {description}: {text!r}", field=field)
    return int(text)


def parse_legacy_payload(text) -> RawPingReply:
    """Split the decoded reply into MOTD and the two player counts."""
    match = COUNTS_TAIL_RE.search(text)
    if match is None:
        raise ProtocolError(f"Server returned a malformed status reply: {text!r}")

    motd = text[:match.start()]
    online_players = _parse_count(match.group(1), "player count", "online_players")
    max_players = _parse_count(match.group(2), "max player count", "max_players")
    return RawPingReply(motd, online_players, max_players)


async def exchange(connection) -> RawPingReply:
    """Send the legacy ping over an open connection and read the reply."""
    await connection.write_frame(bytes([config.LEGACY_PING_PACKET_ID]), prefix_length=False)

    packet_type = await connection.read_byte()
    if packet_type != config.KICK_PACKET_ID:
        raise ProtocolError(
            f"Packet returned from server was unexpected type: 0x{packet_type:02X}"
        )

    # 长度是 UTF-16 code unit 的个数，不是字节数
    length = await connection.read_short()
    data = await connection.read_bytes(length * 2)
    text = data.decode(config.PAYLOAD_ENCODING, errors="replace")
    logger.debug(f"收到状态回复 ({length} 字符): {text!r}")

    return parse_legacy_payload(text)


async def get_legacy_status(host, options=None):
    """Retrieve the status of a server using the Beta 1.8 - 1.3.2 format.

    Args:
        host: hostname or IPv4 address of the server
        options: ``None``, a ``StatusOptions`` or a mapping of overrides
            (``port``, ``protocol_version``, ``timeout`` in milliseconds,
            ``enable_srv``)

    Returns:
        StatusResponse

    Raises:
        LegacyStatusError: one of its subclasses, for any failure
    """
    if not isinstance(host, str):
        raise ValidationError(f"Expected 'host' to be a string, got {type(host).__name__}")
    if not host:
        raise ValidationError("Expected 'host' to have content, got an empty string")

    opts = apply_default_options(options)
    deadline = Deadline(opts.timeout)

    srv_record = None
    if opts.enable_srv and not utils.is_ipv4_literal(host):
        srv_record = await resolve_srv(host, timeout=deadline.remaining())

    connect_host = srv_record.host if srv_record else host
    connect_port = srv_record.port if srv_record else opts.port

    start_time = time.perf_counter()
    connection = await TCPConnection.connect(connect_host, connect_port, deadline=deadline)
    async with connection:
        reply = await exchange(connection)
        round_trip_latency = round((time.perf_counter() - start_time) * 1000)

    logger.debug(
        f"{host} -> {connect_host}:{connect_port} 在线 {reply.online_players}/{reply.max_players}, "
        f"{round_trip_latency}ms"
    )
    return format_result(
        host,
        connect_port,
        srv_record,
        reply.motd,
        reply.online_players,
        reply.max_players,
        round_trip_latency,
    )


def get_legacy_status_sync(host, options=None):
    return asyncio.run(get_legacy_status(host, options))
