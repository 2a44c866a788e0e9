"""Legacy (Beta 1.8 - 1.3.2) Minecraft Server List Ping client."""

from .errors import (
    LegacyStatusError,
    ProtocolError,
    ResolutionError,
    ServerConnectionError,
    ServerTimeoutError,
    ValidationError,
)
from .options import StatusOptions, apply_default_options, default_options
from .response import Motd, Players, StatusResponse
from .srv import SRVRecord
from .status_fe import get_legacy_status, get_legacy_status_sync

__all__ = [
    'get_legacy_status',
    'get_legacy_status_sync',
    'StatusOptions',
    'apply_default_options',
    'default_options',
    'StatusResponse',
    'Motd',
    'Players',
    'SRVRecord',
    'LegacyStatusError',
    'ValidationError',
    'ResolutionError',
    'ServerConnectionError',
    'ServerTimeoutError',
    'ProtocolError',
]
