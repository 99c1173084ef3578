import asyncio

import pytest

from gateway_config.assert_loc import AssertLocationRequest, encode_assert_loc
from gateway_config.characteristic import AssertLocationCharacteristic
from gateway_config.const import (
    DBUS_ERROR_SERVICE_UNKNOWN,
    MINER_ERROR_BADARGS,
    MINER_ERROR_INTERNAL,
    UUID_GATEWAY_GATT_CHAR_ASSERT_LOC,
)
from gateway_config.geo import h3_index
from gateway_config.miner import MinerClient

from .conftest import FakeBus, error_reply, method_return

PATH = "/com/helium/gateway/service0/char0"
REQUEST = encode_assert_loc(
    AssertLocationRequest(lat=10.0, lon=11.0, owner="owner", nonce=1, fee=2, amount=3, payer="payer")
)


def make_char(reply=None, notifier=None):
    bus = FakeBus(reply if reply is not None else method_return(b"txn"))
    return AssertLocationCharacteristic(PATH, MinerClient(bus), notifier=notifier), bus


def write(char, data):
    return asyncio.run(char.write_value(data))


def test_uuid_flags_descriptors():
    char, _ = make_char()
    assert char.uuid == UUID_GATEWAY_GATT_CHAR_ASSERT_LOC
    assert char.flags == ["read", "write", "notify"]
    assert [d["uuid"] for d in char.descriptors] == ["2901", "2904"]
    assert char.descriptors[0]["value"] == b"Assert Location"
    # opaque format, exponent 0, unitless, SIG namespace, no description
    assert char.descriptors[1]["value"] == b"\x1b\x00\x00\x27\x01\x00\x00"


def test_initial_value():
    char, _ = make_char()
    assert char.read_value() == b"init"
    assert char.notifying is False


def test_success_passes_request_to_miner():
    char, bus = make_char()

    assert write(char, REQUEST) == b"txn"

    assert char.read_value() == b"txn"
    assert bus.messages[0].body == [h3_index(10.0, 11.0), "owner", 1, 3, 2, "payer"]


@pytest.mark.parametrize(
    "error_name,value",
    [
        (DBUS_ERROR_SERVICE_UNKNOWN, b"wait"),
        (MINER_ERROR_BADARGS, b"badargs"),
        (MINER_ERROR_INTERNAL, b"error"),
        ("com.unknown.Error", b"unknown"),
    ],
)
def test_miner_errors(error_name, value):
    char, _ = make_char(error_reply(error_name))
    write(char, REQUEST)
    assert char.read_value() == value


@pytest.mark.parametrize("payload", [b"invalid", b"\xff\xff\xff", b"\x0a\x05ab"])
def test_undecodable_write_is_badargs(payload):
    char, bus = make_char()
    write(char, payload)
    assert char.read_value() == b"badargs"
    assert bus.messages == []


def test_invalid_location_is_badargs():
    char, bus = make_char()
    write(char, encode_assert_loc(AssertLocationRequest(lat=95.0, lon=11.0)))
    assert char.read_value() == b"badargs"
    assert bus.messages == []


def test_miner_timeout_is_wait():
    bus = FakeBus(method_return(b"txn"), delay=1.0)
    char = AssertLocationCharacteristic(PATH, MinerClient(bus, timeout=0.01))
    write(char, REQUEST)
    assert char.read_value() == b"wait"


def test_read_offset():
    char, _ = make_char(method_return(b"transaction"))
    write(char, REQUEST)

    assert char.read_value(0) == b"transaction"
    assert char.read_value(5) == b"action"
    assert char.read_value(len(b"transaction")) == b""
    assert char.read_value(100) == b""


def test_start_notify_pushes_current_value(notifications):
    char, _ = make_char(notifier=notifications)

    char.start_notify()
    assert char.notifying is True
    assert notifications.events == [(PATH, b"init")]

    # Calling start_notify again has no effect
    char.start_notify()
    assert char.notifying is True
    assert notifications.events == [(PATH, b"init")]


def test_stop_notify_is_idempotent(notifications):
    char, _ = make_char(notifier=notifications)

    char.stop_notify()
    assert char.notifying is False

    char.start_notify()
    char.stop_notify()
    char.stop_notify()
    assert char.notifying is False
    assert notifications.events == [(PATH, b"init")]


def test_no_notifications_while_not_notifying(notifications):
    char, _ = make_char(notifier=notifications)

    for payload in (REQUEST, b"invalid", REQUEST):
        write(char, payload)

    assert notifications.events == []


def test_one_notification_per_write(notifications):
    char, _ = make_char(notifier=notifications)
    char.start_notify()

    write(char, REQUEST)
    write(char, b"invalid")

    assert notifications.events == [
        (PATH, b"init"),
        (PATH, b"txn"),
        (PATH, b"badargs"),
    ]


def test_notify_stops_after_stop_notify(notifications):
    char, _ = make_char(notifier=notifications)
    char.start_notify()
    char.stop_notify()

    write(char, REQUEST)

    assert notifications.events == [(PATH, b"init")]
    assert char.read_value() == b"txn"


def test_end_to_end_scenario():
    bus = FakeBus(method_return(b"txn"))
    char = AssertLocationCharacteristic(PATH, MinerClient(bus))
    payload = encode_assert_loc(AssertLocationRequest(lat=10.0, lon=11.0))

    write(char, payload)
    assert char.read_value() == b"txn"

    bus.reply = error_reply(DBUS_ERROR_SERVICE_UNKNOWN)
    write(char, payload)
    assert char.read_value() == b"wait"

    write(char, b"invalid")
    assert char.read_value() == b"badargs"


def test_concurrent_writes_are_serialized():
    bus = FakeBus(method_return(b"txn"), delay=0.01)
    char = AssertLocationCharacteristic(PATH, MinerClient(bus))
    seen = []

    async def run():
        async def read_during_write():
            await asyncio.sleep(0.005)
            seen.append(char.read_value())

        await asyncio.gather(
            char.write_value(REQUEST),
            char.write_value(b"invalid"),
            read_during_write(),
        )

    asyncio.run(run())

    assert seen == [b"init"]
    assert char.read_value() == b"badargs"


class BrokenBus:
    async def call(self, message):
        raise ConnectionResetError("bus connection lost")


def test_lost_bus_replaces_stale_value(notifications):
    char, _ = make_char(notifier=notifications)
    write(char, REQUEST)
    char.start_notify()

    char.miner = MinerClient(BrokenBus())
    assert write(char, REQUEST) == b"wait"

    assert char.read_value() == b"wait"
    assert notifications.events == [(PATH, b"txn"), (PATH, b"wait")]


def test_non_bytes_miner_reply_is_unknown():
    char, _ = make_char(method_return("txn"))
    write(char, REQUEST)
    assert char.read_value() == b"unknown"


def test_failing_notifier_does_not_fail_write():
    def notifier(path, value):
        raise RuntimeError("emit failed")

    char, _ = make_char(notifier=notifier)
    char.start_notify()
    assert char.notifying is True

    assert write(char, REQUEST) == b"txn"
    assert char.read_value() == b"txn"
