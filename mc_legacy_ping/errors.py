"""Exceptions raised by the legacy status query.

Every error is terminal for the call that raised it. Callers that only care
whether a server answered can catch ``LegacyStatusError``.
"""


class LegacyStatusError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(LegacyStatusError, ValueError):
    """The host or options were rejected before any network I/O."""


class ResolutionError(LegacyStatusError):
    """The SRV lookup itself failed (not the same as "no record")."""


class ServerConnectionError(LegacyStatusError, ConnectionError):
    """The TCP connection could not be established or was closed early."""


class ServerTimeoutError(LegacyStatusError, TimeoutError):
    """The overall deadline elapsed while resolving, connecting or reading."""


class ProtocolError(LegacyStatusError):
    """The server answered with something that is not a legacy status reply."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field
