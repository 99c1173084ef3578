"""Assert location GATT characteristic."""
import asyncio
import logging
import struct
from typing import Any, Callable, Dict, List, Optional

from .assert_loc import decode_assert_loc
from .const import (
    ASSERT_LOC_DESCRIPTION,
    FLAG_NOTIFY,
    FLAG_READ,
    FLAG_WRITE,
    H3_LATLON_RESOLUTION,
    PF_FORMAT_OPAQUE,
    PF_NAMESPACE_BT_SIG,
    PF_UNIT_UNITLESS,
    UUID_GATEWAY_GATT_CHAR_ASSERT_LOC,
    UUID_GATT_DESCRIPTOR_CUD,
    UUID_GATT_DESCRIPTOR_PF,
    VALUE_BADARGS,
    VALUE_INIT,
)
from .errors import MinerError, RequestError, wire_value
from .geo import h3_index

_LOGGER = logging.getLogger(__name__)

Notifier = Callable[[str, bytes], None]


def presentation_format(fmt: int) -> bytes:
    """Encode a Characteristic Presentation Format descriptor value."""
    # format, exponent, unit, namespace, description
    return struct.pack("<BbHBH", fmt, 0, PF_UNIT_UNITLESS, PF_NAMESPACE_BT_SIG, 0)


DESCRIPTORS = [
    {
        "uuid": UUID_GATT_DESCRIPTOR_CUD,
        "flags": [FLAG_READ],
        "value": ASSERT_LOC_DESCRIPTION.encode("utf-8"),
    },
    {
        "uuid": UUID_GATT_DESCRIPTOR_PF,
        "flags": [FLAG_READ],
        "value": presentation_format(PF_FORMAT_OPAQUE),
    },
]


class AssertLocationCharacteristic:
    """
    Turns assert location requests into miner transactions.

    A write decodes the request, computes the H3 index and asks the miner
    for a transaction. The result, or a short status token when any step
    fails, becomes the readable value and is pushed to subscribers while
    notifying. Writes never fail at the GATT level; failures are only
    visible through the value:

        badargs  request could not be decoded or rejected by the miner
        wait     miner not reachable (or timed out)
        error    miner internal error
        unknown  any other miner error
    """

    def __init__(self, path: str, miner, notifier: Optional[Notifier] = None):
        """Initialize the characteristic at the given object path."""
        self.path = path
        self.miner = miner
        self.notifier = notifier
        self.notifying = False
        self.value = VALUE_INIT
        self._write_lock = asyncio.Lock()

    @property
    def uuid(self) -> str:
        """Return the characteristic UUID."""
        return UUID_GATEWAY_GATT_CHAR_ASSERT_LOC

    @property
    def flags(self) -> List[str]:
        """Return the characteristic flags."""
        return [FLAG_READ, FLAG_WRITE, FLAG_NOTIFY]

    @property
    def descriptors(self) -> List[Dict[str, Any]]:
        """Return the static descriptors advertised with the characteristic."""
        return DESCRIPTORS

    def read_value(self, offset: int = 0) -> bytes:
        """
        Return the current value starting at offset.

        Offsets at or past the end yield an empty value rather than an error,
        since offsets come from the remote peer.
        """
        value = self.value
        if offset <= 0:
            return value
        return value[offset:]

    async def write_value(self, data: bytes) -> bytes:
        """Handle a write and return the value it produced."""
        async with self._write_lock:
            value = await self._handle_request(data)
            self.value = value
            self._maybe_notify_value()
            return value

    async def _handle_request(self, data: bytes) -> bytes:
        try:
            request = decode_assert_loc(data)
            h3_string = h3_index(request.lat, request.lon)
        except RequestError as e:
            _LOGGER.warning(f"Failed to decode assert_loc request: {e}")
            return VALUE_BADARGS

        _LOGGER.info(
            f"Requesting assert_loc_txn for lat/lon/res: "
            f"{{{request.lat}, {request.lon}, {H3_LATLON_RESOLUTION}}} index: {h3_string}"
        )

        try:
            return await self.miner.assert_location(
                h3_string,
                request.owner,
                request.nonce,
                request.amount,
                request.fee,
                request.payer,
            )
        except MinerError as e:
            _LOGGER.warning(f"Failed to get assert_loc txn: {e}")
            return wire_value(e.error_name)

    def start_notify(self) -> None:
        """Start notifying and push the current value."""
        if self.notifying:
            # Already notifying
            return
        self.notifying = True
        self._maybe_notify_value()

    def stop_notify(self) -> None:
        """Stop notifying."""
        if not self.notifying:
            return
        self.notifying = False

    def _maybe_notify_value(self) -> None:
        if not self.notifying or self.notifier is None:
            return
        try:
            self.notifier(self.path, self.value)
        except Exception as e:
            _LOGGER.warning(f"Failed to notify {self.path}: {e}")
