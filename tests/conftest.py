"""Shared fixtures for gateway_config tests."""
import asyncio
from types import SimpleNamespace

import pytest
from dbus_fast import MessageType


class FakeBus:
    """Stands in for a dbus-fast MessageBus, answering every call with `reply`."""

    def __init__(self, reply=None, delay: float = 0.0):
        self.reply = reply
        self.delay = delay
        self.messages = []

    async def call(self, message):
        self.messages.append(message)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.reply


def method_return(*body):
    return SimpleNamespace(message_type=MessageType.METHOD_RETURN, body=list(body))


def error_reply(error_name, text="failed"):
    return SimpleNamespace(message_type=MessageType.ERROR, error_name=error_name, body=[text])


@pytest.fixture
def notifications():
    """Records (path, value) pairs passed to a characteristic notifier."""
    events = []

    def notifier(path, value):
        events.append((path, value))

    notifier.events = events
    return notifier


class FakeMessageBus(FakeBus):
    """FakeBus that also records exports and answers calls by member name."""

    def __init__(self, replies=None):
        super().__init__()
        self.replies = replies or {}
        self.bus_type = None
        self.exported = {}
        self.unexported = []
        self.disconnected = False

    def __call__(self, bus_type=None):
        self.bus_type = bus_type
        return self

    async def connect(self):
        return self

    def export(self, path, interface):
        self.exported[path] = interface

    def unexport(self, path):
        self.unexported.append(path)

    def disconnect(self):
        self.disconnected = True

    async def call(self, message):
        self.messages.append(message)
        return self.replies.get(message.member, method_return())

    def members(self):
        return [message.member for message in self.messages]
