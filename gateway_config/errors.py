"""Errors and miner error translation for the gateway configuration service."""
from enum import Enum

from .const import (
    DBUS_ERROR_NO_REPLY,
    DBUS_ERROR_SERVICE_UNKNOWN,
    MINER_ERROR_BADARGS,
    MINER_ERROR_INTERNAL,
    VALUE_BADARGS,
    VALUE_ERROR,
    VALUE_UNKNOWN,
    VALUE_WAIT,
)


class GatewayError(Exception):
    """Base error for the gateway configuration service."""


class ConfigError(GatewayError):
    """Configuration file could not be loaded or validated."""


class RequestError(GatewayError):
    """A characteristic write carried an unusable request."""


class DecodeError(RequestError):
    """Write payload is not a valid assert location message."""


class InvalidLocationError(RequestError):
    """Coordinates cannot be converted to an H3 index."""


class MinerError(GatewayError):
    """The miner rejected or failed to answer a request."""

    def __init__(self, error_name: str, message: str = ""):
        """Initialize with the D-Bus error name reported for the call."""
        super().__init__(f"{error_name}: {message}" if message else error_name)
        self.error_name = error_name
        self.message = message


class MinerErrorReason(Enum):
    """Closed set of miner failure classes, valued by their wire token."""

    UNAVAILABLE = VALUE_WAIT
    BAD_ARGS = VALUE_BADARGS
    INTERNAL = VALUE_ERROR
    UNKNOWN = VALUE_UNKNOWN


_REASONS = {
    DBUS_ERROR_SERVICE_UNKNOWN: MinerErrorReason.UNAVAILABLE,
    # Timed out calls are reported the same as an absent miner
    DBUS_ERROR_NO_REPLY: MinerErrorReason.UNAVAILABLE,
    MINER_ERROR_BADARGS: MinerErrorReason.BAD_ARGS,
    MINER_ERROR_INTERNAL: MinerErrorReason.INTERNAL,
}


def reason_for(error_name) -> MinerErrorReason:
    """Classify a D-Bus error name returned for a miner call."""
    return _REASONS.get(error_name, MinerErrorReason.UNKNOWN)


def wire_value(error_name) -> bytes:
    """Return the characteristic value reported for a miner error name."""
    return reason_for(error_name).value
