"""Caller-facing status response and MOTD rendering."""

import html
from dataclasses import dataclass
from typing import Optional

from . import config
from . import utils
from .srv import SRVRecord

COLOR_CODES = {
    "0": "#000000",
    "1": "#0000AA",
    "2": "#00AA00",
    "3": "#00AAAA",
    "4": "#AA0000",
    "5": "#AA00AA",
    "6": "#FFAA00",
    "7": "#AAAAAA",
    "8": "#555555",
    "9": "#5555FF",
    "a": "#55FF55",
    "b": "#55FFFF",
    "c": "#FF5555",
    "d": "#FF55FF",
    "e": "#FFFF55",
    "f": "#FFFFFF",
}

STYLE_CODES = {
    "k": "",  # obfuscated，只加 class，没有对应的 CSS
    "l": "font-weight:bold;",
    "m": "text-decoration:line-through;",
    "n": "text-decoration:underline;",
    "o": "font-style:italic;",
}


@dataclass(frozen=True)
class Motd:
    raw: str
    clean: str
    html: str


@dataclass(frozen=True)
class Players:
    online: int
    max: int


@dataclass(frozen=True)
class StatusResponse:
    host: str
    port: int
    srv_record: Optional[SRVRecord]
    motd: Motd
    players: Players
    round_trip_latency: int

    def to_dict(self):
        return {
            "host": self.host,
            "port": self.port,
            "srvRecord": None if self.srv_record is None else {
                "host": self.srv_record.host,
                "port": self.srv_record.port,
            },
            "motd": {
                "raw": self.motd.raw,
                "clean": self.motd.clean,
                "html": self.motd.html,
            },
            "players": {
                "online": self.players.online,
                "max": self.players.max,
            },
            "roundTripLatency": self.round_trip_latency,
        }


def _open_span(color, styles):
    css = ""
    if color:
        css += f"color:{color};"
    css += "".join(STYLE_CODES[code] for code in styles)
    attrs = f' style="{css}"' if css else ""
    if "k" in styles:
        attrs += ' class="minecraft-formatted--obfuscated"'
    return f"<span{attrs}>"


def motd_to_html(raw):
    """Render formatting codes as a flat sequence of ``<span>`` runs."""
    parts = []
    color = None
    styles = []
    buffer = []

    def flush():
        if not buffer:
            return
        text = html.escape("".join(buffer))
        if color or styles:
            parts.append(_open_span(color, styles) + text + "</span>")
        else:
            parts.append(text)
        buffer.clear()

    chars = iter(raw)
    for char in chars:
        if char != config.SECTION_SIGN:
            buffer.append(char)
            continue
        code = next(chars, "").lower()
        if not code:
            break
        flush()
        if code in COLOR_CODES:
            # 颜色代码会重置之前的样式
            color = COLOR_CODES[code]
            styles = []
        elif code in STYLE_CODES:
            if code not in styles:
                styles.append(code)
        elif code == "r":
            color = None
            styles = []
    flush()
    return "".join(parts)


def parse_motd(raw):
    return Motd(raw=raw, clean=utils.strip_color_codes(raw), html=motd_to_html(raw))


def format_result(host, port, srv_record, motd, online_players, max_players, round_trip_latency):
    return StatusResponse(
        host=host,
        port=port,
        srv_record=srv_record,
        motd=parse_motd(motd),
        players=Players(online=online_players, max=max_players),
        round_trip_latency=round_trip_latency,
    )
