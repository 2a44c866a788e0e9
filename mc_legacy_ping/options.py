from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

from . import config
from .errors import ValidationError


@dataclass(frozen=True)
class StatusOptions:
    port: int = config.DEFAULT_PORT
    protocol_version: int = config.DEFAULT_PROTOCOL_VERSION
    timeout: float = config.DEFAULT_TIMEOUT  # 毫秒
    enable_srv: bool = config.DEFAULT_ENABLE_SRV


OPTION_NAMES = tuple(f.name for f in fields(StatusOptions))


def default_options():
    """Return a fresh defaults value; nothing is shared between calls."""
    return StatusOptions()


def _is_int(value):
    # bool 是 int 的子类，这里要排除
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return (_is_int(value) or isinstance(value, float)) and value == value


def validate_options(opts: StatusOptions) -> StatusOptions:
    if not _is_int(opts.port):
        raise ValidationError(f"Expected 'options.port' to be an integer, got {opts.port!r}")
    if opts.port <= 0:
        raise ValidationError(f"Expected 'options.port' to be greater than 0, got {opts.port}")
    if opts.port >= 65536:
        raise ValidationError(f"Expected 'options.port' to be less than 65536, got {opts.port}")

    if not _is_int(opts.protocol_version):
        raise ValidationError(
            f"Expected 'options.protocol_version' to be an integer, got {opts.protocol_version!r}"
        )
    if opts.protocol_version < 0:
        raise ValidationError(
            f"Expected 'options.protocol_version' to be greater than or equal to 0, got {opts.protocol_version}"
        )

    if not _is_number(opts.timeout):
        raise ValidationError(f"Expected 'options.timeout' to be a number, got {opts.timeout!r}")
    if opts.timeout <= 0:
        raise ValidationError(f"Expected 'options.timeout' to be greater than 0, got {opts.timeout}")

    if not isinstance(opts.enable_srv, bool):
        raise ValidationError(f"Expected 'options.enable_srv' to be a boolean, got {opts.enable_srv!r}")

    return opts


def apply_default_options(options=None) -> StatusOptions:
    """Merge caller overrides onto the defaults and validate the result.

    ``options`` may be ``None``, a ``StatusOptions`` or a mapping holding any
    subset of the option names. Mapping entries set to ``None`` keep the
    default.
    """
    if options is None:
        return validate_options(default_options())

    if isinstance(options, StatusOptions):
        return validate_options(options)

    if not isinstance(options, Mapping):
        raise ValidationError(
            f"Expected 'options' to be a mapping, StatusOptions or None, got {type(options).__name__}"
        )

    unknown = sorted(str(key) for key in options if key not in OPTION_NAMES)
    if unknown:
        raise ValidationError(f"Unknown option(s): {', '.join(unknown)}")

    overrides = {key: value for key, value in options.items() if value is not None}
    return validate_options(replace(default_options(), **overrides))
