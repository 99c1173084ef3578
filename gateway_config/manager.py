"""Gateway GATT service manager."""
import logging
from typing import Any, Dict, Optional

from dbus_fast import BusType, Message, MessageType
from dbus_fast.aio import MessageBus

from .characteristic import AssertLocationCharacteristic
from .const import (
    BLUEZ_ADAPTER_PATH,
    BLUEZ_SERVICE_NAME,
    BUS_SESSION,
    CONF_ADAPTER,
    CONF_BUS,
    CONF_MINER_TIMEOUT,
    GATT_MANAGER_IFACE,
)
from .errors import GatewayError
from .gatt import GattApplication, GattService
from .miner import MinerClient

_LOGGER = logging.getLogger(__name__)


class GatewayManager:
    """Owns the bus connection and the exported GATT application."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize the manager."""
        self.config = config
        self.bus: Optional[MessageBus] = None
        self.application: Optional[GattApplication] = None
        self.assert_loc: Optional[AssertLocationCharacteristic] = None
        self.registered = False

    @property
    def adapter_path(self) -> str:
        """Return the BlueZ object path of the configured adapter."""
        return BLUEZ_ADAPTER_PATH.format(self.config[CONF_ADAPTER])

    def build_application(self, miner: MinerClient) -> GattApplication:
        """Create the GATT application and its characteristics."""
        application = GattApplication()
        service = GattService(application.service_path(0))

        self.assert_loc = AssertLocationCharacteristic(
            application.char_path(service, 0),
            miner,
            notifier=application.value_changed,
        )
        service.add_characteristic(self.assert_loc)
        application.add_service(service)

        self.application = application
        return application

    async def start(self) -> None:
        """Connect to the bus, export the application and register it with BlueZ."""
        bus_type = BusType.SESSION if self.config[CONF_BUS] == BUS_SESSION else BusType.SYSTEM
        self.bus = await MessageBus(bus_type=bus_type).connect()
        _LOGGER.info(f"Connected to {self.config[CONF_BUS]} bus")

        miner = MinerClient(self.bus, timeout=self.config[CONF_MINER_TIMEOUT])
        application = self.build_application(miner)

        for path, interface in application.objects().items():
            self.bus.export(path, interface)

        reply = await self.bus.call(
            Message(
                destination=BLUEZ_SERVICE_NAME,
                path=self.adapter_path,
                interface=GATT_MANAGER_IFACE,
                member="RegisterApplication",
                signature="oa{sv}",
                body=[application.path, {}],
            )
        )
        if reply.message_type == MessageType.ERROR:
            raise GatewayError(
                f"Failed to register GATT application on {self.adapter_path}: "
                f"{reply.error_name}"
            )

        self.registered = True
        _LOGGER.info(f"Registered GATT application {application.path} on {self.adapter_path}")

    async def stop(self) -> None:
        """Unregister and unexport the application and close the bus."""
        if self.bus is None:
            return

        if self.registered:
            reply = await self.bus.call(
                Message(
                    destination=BLUEZ_SERVICE_NAME,
                    path=self.adapter_path,
                    interface=GATT_MANAGER_IFACE,
                    member="UnregisterApplication",
                    signature="o",
                    body=[self.application.path],
                )
            )
            if reply.message_type == MessageType.ERROR:
                _LOGGER.warning(f"Failed to unregister GATT application: {reply.error_name}")
            self.registered = False

        if self.application is not None:
            for path in self.application.objects():
                self.bus.unexport(path)

        self.bus.disconnect()
        self.bus = None
        _LOGGER.info("Gateway GATT service stopped")
