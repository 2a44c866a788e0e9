import re

from . import config

IPV4_LITERAL_RE = re.compile(r"\d{1,3}(\.\d{1,3}){3}", re.ASCII)
FORMAT_CODE_RE = re.compile(config.SECTION_SIGN + ".", re.DOTALL)


def pack_varint(value):
    if value < 0:
        raise ValueError(f"VarInt 不支持负数: {value}")
    data = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value != 0:
            byte |= 0x80
        data.append(byte)
        if value == 0:
            break
    return bytes(data)


def is_ipv4_literal(host):
    """Dotted-quad shape check only; octets are not range-checked."""
    return IPV4_LITERAL_RE.fullmatch(host) is not None


def strip_color_codes(text):
    """Remove Minecraft formatting codes (a section sign plus one character)."""
    return FORMAT_CODE_RE.sub("", text)
