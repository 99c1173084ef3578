"""BlueZ GATT objects for the gateway service."""
import logging
from typing import Dict, List

from dbus_fast.constants import PropertyAccess
from dbus_fast.service import ServiceInterface, dbus_property, method

from .const import (
    GATT_APPLICATION_IFACE,
    GATT_APPLICATION_PATH,
    GATT_CHRC_IFACE,
    GATT_DESC_IFACE,
    GATT_SERVICE_IFACE,
    UUID_GATEWAY_GATT_SERVICE,
)

_LOGGER = logging.getLogger(__name__)


def read_offset(options: Dict) -> int:
    """Extract the ATT read offset from BlueZ ReadValue options, never below 0."""
    offset = options.get("offset")
    if offset is None:
        return 0
    return max(0, int(getattr(offset, "value", offset)))


class GattDescriptor(ServiceInterface):
    """Static, read only GATT descriptor."""

    def __init__(self, characteristic: "GattCharacteristic", index: int, descriptor: Dict):
        """Initialize the descriptor from a characteristic descriptor entry."""
        super().__init__(GATT_DESC_IFACE)
        self.path = f"{characteristic.path}/desc{index}"
        self.characteristic = characteristic
        self.uuid = descriptor["uuid"]
        self.flags = descriptor["flags"]
        self.value = descriptor["value"]

    @dbus_property(access=PropertyAccess.READ)
    def UUID(self) -> "s":
        return self.uuid

    @dbus_property(access=PropertyAccess.READ)
    def Characteristic(self) -> "o":
        return self.characteristic.path

    @dbus_property(access=PropertyAccess.READ)
    def Flags(self) -> "as":
        return self.flags

    @method()
    def ReadValue(self, options: "a{sv}") -> "ay":
        return self.value[read_offset(options):]


class GattCharacteristic(ServiceInterface):
    """Exposes a characteristic's read, write and notify handlers to BlueZ."""

    def __init__(self, service: "GattService", characteristic):
        """Initialize around a characteristic such as AssertLocationCharacteristic."""
        super().__init__(GATT_CHRC_IFACE)
        self.service = service
        self.characteristic = characteristic
        self.path = characteristic.path
        self.descriptors = [
            GattDescriptor(self, index, descriptor)
            for index, descriptor in enumerate(characteristic.descriptors)
        ]

    @dbus_property(access=PropertyAccess.READ)
    def UUID(self) -> "s":
        return self.characteristic.uuid

    @dbus_property(access=PropertyAccess.READ)
    def Service(self) -> "o":
        return self.service.path

    @dbus_property(access=PropertyAccess.READ)
    def Flags(self) -> "as":
        return self.characteristic.flags

    @dbus_property(access=PropertyAccess.READ)
    def Notifying(self) -> "b":
        return self.characteristic.notifying

    @dbus_property(access=PropertyAccess.READ)
    def Value(self) -> "ay":
        return self.characteristic.value

    @method()
    def ReadValue(self, options: "a{sv}") -> "ay":
        return self.characteristic.read_value(read_offset(options))

    @method()
    async def WriteValue(self, value: "ay", options: "a{sv}"):
        await self.characteristic.write_value(bytes(value))

    @method()
    def StartNotify(self):
        self.characteristic.start_notify()

    @method()
    def StopNotify(self):
        self.characteristic.stop_notify()

    def value_changed(self, value: bytes) -> None:
        """Push a new value to subscribed centrals."""
        self.emit_properties_changed({"Value": value})


class GattService(ServiceInterface):
    """Primary GATT service holding the gateway characteristics."""

    def __init__(self, path: str, uuid: str = UUID_GATEWAY_GATT_SERVICE):
        """Initialize the service."""
        super().__init__(GATT_SERVICE_IFACE)
        self.path = path
        self.uuid = uuid
        self.characteristics: List[GattCharacteristic] = []

    def add_characteristic(self, characteristic) -> GattCharacteristic:
        """Wrap and attach a characteristic to this service."""
        gatt_characteristic = GattCharacteristic(self, characteristic)
        self.characteristics.append(gatt_characteristic)
        return gatt_characteristic

    @dbus_property(access=PropertyAccess.READ)
    def UUID(self) -> "s":
        return self.uuid

    @dbus_property(access=PropertyAccess.READ)
    def Primary(self) -> "b":
        return True


class GattApplication(ServiceInterface):
    """Root object registered with BlueZ's GattManager1."""

    def __init__(self, path: str = GATT_APPLICATION_PATH):
        """Initialize the application."""
        super().__init__(GATT_APPLICATION_IFACE)
        self.path = path
        self.services: List[GattService] = []

    def service_path(self, index: int) -> str:
        """Return the object path for the service at index."""
        return f"{self.path}/service{index}"

    def add_service(self, service: GattService) -> None:
        """Attach a service to the application."""
        self.services.append(service)

    def char_path(self, service: GattService, index: int) -> str:
        """Return the object path for a characteristic of a service."""
        return f"{service.path}/char{index}"

    def objects(self) -> Dict[str, ServiceInterface]:
        """Return every object to export, keyed by object path."""
        result = {self.path: self}
        for service in self.services:
            result[service.path] = service
            for characteristic in service.characteristics:
                result[characteristic.path] = characteristic
                for descriptor in characteristic.descriptors:
                    result[descriptor.path] = descriptor
        return result

    def value_changed(self, path: str, value: bytes) -> None:
        """Notify subscribers of the characteristic at path."""
        for service in self.services:
            for characteristic in service.characteristics:
                if characteristic.path == path:
                    characteristic.value_changed(value)
                    return
        _LOGGER.warning(f"No characteristic at {path} to notify")
