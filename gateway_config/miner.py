"""Client for the miner's D-Bus API."""
import asyncio
import logging

from dbus_fast import Message, MessageType

from .const import (
    DBUS_ERROR_NO_REPLY,
    DBUS_ERROR_SERVICE_UNKNOWN,
    DEFAULT_MINER_TIMEOUT,
    MINER_APPLICATION_NAME,
    MINER_ASSERT_LOC_SIGNATURE,
    MINER_ERROR_UNEXPECTED_REPLY,
    MINER_INTERFACE,
    MINER_MEMBER_ASSERT_LOC,
    MINER_OBJECT_PATH,
)
from .errors import MinerError

_LOGGER = logging.getLogger(__name__)


class MinerClient:
    """Calls methods on the miner over a connected message bus."""

    def __init__(self, bus, timeout: float = DEFAULT_MINER_TIMEOUT):
        """Initialize the client with a connected dbus-fast MessageBus."""
        self.bus = bus
        self.timeout = timeout

    async def call(self, member: str, signature: str, body: list) -> list:
        """
        Make one method call on the miner object.

        Returns the reply body. Error replies raise MinerError with the
        D-Bus error name; a call that outlives the timeout raises MinerError
        with the NoReply error name, and a failed connection raises it with
        the ServiceUnknown error name. No retries are made.
        """
        message = Message(
            destination=MINER_APPLICATION_NAME,
            path=MINER_OBJECT_PATH,
            interface=MINER_INTERFACE,
            member=member,
            signature=signature,
            body=body,
        )

        try:
            reply = await asyncio.wait_for(self.bus.call(message), self.timeout)
        except asyncio.TimeoutError as e:
            raise MinerError(
                DBUS_ERROR_NO_REPLY, f"{member} timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            # Lost or broken bus connection
            raise MinerError(DBUS_ERROR_SERVICE_UNKNOWN, f"{member} failed: {e!r}") from e

        if reply.message_type == MessageType.ERROR:
            detail = reply.body[0] if reply.body else ""
            raise MinerError(reply.error_name, str(detail))

        return reply.body

    async def assert_location(
        self,
        h3_index: str,
        owner: str,
        nonce: int,
        amount: int,
        fee: int,
        payer: str,
    ) -> bytes:
        """Ask the miner to build an assert location transaction."""
        body = await self.call(
            MINER_MEMBER_ASSERT_LOC,
            MINER_ASSERT_LOC_SIGNATURE,
            [h3_index, owner, nonce, amount, fee, payer],
        )

        if len(body) != 1:
            raise MinerError(
                MINER_ERROR_UNEXPECTED_REPLY,
                f"Expected one value, got {len(body)}",
            )
        if not isinstance(body[0], (bytes, bytearray)):
            raise MinerError(
                MINER_ERROR_UNEXPECTED_REPLY,
                f"Expected a byte array, got {type(body[0]).__name__}",
            )

        _LOGGER.debug(f"Received assert_loc txn of {len(body[0])} bytes")
        return bytes(body[0])
