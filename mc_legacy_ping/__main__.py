import argparse
import json
import logging
import sys

from . import config
from .errors import LegacyStatusError
from .status_fe import get_legacy_status_sync

logger = logging.getLogger("mc_legacy_ping")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="mc_legacy_ping",
        description="Query a Beta 1.8 - 1.3.2 Minecraft server with the legacy Server List Ping",
    )
    parser.add_argument("host", help="server hostname or IPv4 address")
    parser.add_argument("-p", "--port", type=int, default=config.DEFAULT_PORT,
                        help=f"server port (default {config.DEFAULT_PORT})")
    parser.add_argument("-t", "--timeout", type=float, default=config.DEFAULT_TIMEOUT,
                        help=f"overall timeout in milliseconds (default {config.DEFAULT_TIMEOUT})")
    parser.add_argument("--no-srv", dest="enable_srv", action="store_false",
                        help="do not look up a _minecraft._tcp SRV record")
    parser.add_argument("--json", action="store_true", help="print the full response as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT,
        stream=sys.stderr,
    )

    options = {"port": args.port, "timeout": args.timeout, "enable_srv": args.enable_srv}
    try:
        response = get_legacy_status_sync(args.host, options)
    except LegacyStatusError as e:
        logger.debug(f"查询 {args.host} 失败: {e!r}")
        print(f"{args.host}: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(response.to_dict(), ensure_ascii=False, indent=2))
    else:
        address = f"{args.host}:{response.port}"
        if response.srv_record:
            address += f" (SRV {response.srv_record.host}:{response.srv_record.port})"
        print(address)
        print(f"MOTD: {response.motd.clean}")
        print(f"Players: {response.players.online}/{response.players.max}")
        print(f"Latency: {response.round_trip_latency}ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
