"""Constants for the gateway configuration service."""

DOMAIN = "gateway_config"

# Configuration constants
CONF_ADAPTER = "adapter"
CONF_BUS = "bus"
CONF_MINER_TIMEOUT = "miner_timeout"
CONF_LOG_LEVEL = "log_level"

BUS_SYSTEM = "system"
BUS_SESSION = "session"

# Default values
DEFAULT_CONFIG_PATH = "gateway_config.yaml"
DEFAULT_ADAPTER = "hci0"
DEFAULT_BUS = BUS_SYSTEM
DEFAULT_MINER_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"

# H3 resolution used for asserted locations
H3_LATLON_RESOLUTION = 12

# GATT UUIDs
UUID_GATEWAY_GATT_SERVICE = "0fda92b2-44a2-4af2-84f5-fa682baa2b8d"
UUID_GATEWAY_GATT_CHAR_ASSERT_LOC = "d435f5de-01a4-4e7d-84ba-dfd347f60275"
UUID_GATT_DESCRIPTOR_CUD = "2901"
UUID_GATT_DESCRIPTOR_PF = "2904"

# Characteristic flags
FLAG_READ = "read"
FLAG_WRITE = "write"
FLAG_NOTIFY = "notify"

# Presentation format: opaque structure, unitless, Bluetooth SIG namespace
PF_FORMAT_OPAQUE = 0x1B
PF_UNIT_UNITLESS = 0x2700
PF_NAMESPACE_BT_SIG = 0x01

ASSERT_LOC_DESCRIPTION = "Assert Location"

# Miner D-Bus endpoint
MINER_APPLICATION_NAME = "com.helium.Miner"
MINER_OBJECT_PATH = "/"
MINER_INTERFACE = "com.helium.Miner"
MINER_MEMBER_ASSERT_LOC = "AssertLocation"
MINER_ASSERT_LOC_SIGNATURE = "ssttts"

MINER_ERROR_BADARGS = "com.helium.Miner.Error.BadArgs"
MINER_ERROR_INTERNAL = "com.helium.Miner.Error.Internal"
MINER_ERROR_UNEXPECTED_REPLY = "com.helium.Miner.Error.UnexpectedReply"
DBUS_ERROR_SERVICE_UNKNOWN = "org.freedesktop.DBus.Error.ServiceUnknown"
DBUS_ERROR_NO_REPLY = "org.freedesktop.DBus.Error.NoReply"

# Values exposed by the assert location characteristic
VALUE_INIT = b"init"
VALUE_WAIT = b"wait"
VALUE_BADARGS = b"badargs"
VALUE_ERROR = b"error"
VALUE_UNKNOWN = b"unknown"

# BlueZ D-Bus names
BLUEZ_SERVICE_NAME = "org.bluez"
BLUEZ_ADAPTER_PATH = "/org/bluez/{}"
GATT_MANAGER_IFACE = "org.bluez.GattManager1"
GATT_SERVICE_IFACE = "org.bluez.GattService1"
GATT_CHRC_IFACE = "org.bluez.GattCharacteristic1"
GATT_DESC_IFACE = "org.bluez.GattDescriptor1"
GATT_APPLICATION_IFACE = "org.bluez.GattApplication1"
GATT_APPLICATION_PATH = "/com/helium/gateway"
