"""Battery readings from UPower over the system bus."""

import logging
from dataclasses import dataclass
from typing import Optional

from dbus_next.aio.message_bus import MessageBus
from dbus_next.constants import BusType
from dbus_next.errors import DBusError, InterfaceNotFoundError

from .errors import BatteryUnavailableError

UPOWER_NAME = "org.freedesktop.UPower"
UPOWER_PATH = "/org/freedesktop/UPower"
DEVICE_IFACE = "org.freedesktop.UPower.Device"
PROPS_IFACE = "org.freedesktop.DBus.Properties"

# UPower device Type and State enums
TYPE_BATTERY = 2
STATE_CHARGING = 1

STATES = {
    0: "Unknown",
    1: "Charging",
    2: "Discharging",
    3: "Empty",
    4: "Fully Charged",
    5: "Pending Charge",
    6: "Pending Discharge",
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatterySample:
    charge_fraction: float
    is_charging: bool
    state: int = 0

    @property
    def state_name(self) -> str:
        return STATES.get(self.state, "Unknown")


class UPowerBattery:
    def __init__(self, serial: Optional[str] = None) -> None:
        self.serial = serial
        self.bus = None
        self.device_path: Optional[str] = None
        self.device_props_interface = None

    async def _get_interface(self, path: str, interface: str):
        introspection = await self.bus.introspect(UPOWER_NAME, path)
        proxy = self.bus.get_proxy_object(UPOWER_NAME, path, introspection)
        return proxy.get_interface(interface)

    async def _device_props(self, path: str) -> dict:
        props = await self._get_interface(path, PROPS_IFACE)
        values = await props.call_get_all(DEVICE_IFACE)
        return {name: variant.value for name, variant in values.items()}

    async def connect(self) -> None:
        try:
            self.bus = await MessageBus(bus_type=BusType.SYSTEM).connect()
            upower = await self._get_interface(UPOWER_PATH, UPOWER_NAME)
            device_paths = await upower.call_enumerate_devices()

            for path in device_paths:
                props = await self._device_props(path)
                if props.get("Type") != TYPE_BATTERY or not props.get("IsPresent", False):
                    continue
                if self.serial is not None and props.get("Serial", "").strip() != self.serial:
                    continue
                self.device_path = path
                break
        except (InterfaceNotFoundError, DBusError, OSError) as e:
            raise BatteryUnavailableError(f"Failed to query UPower: {e}") from e

        if self.device_path is None:
            if self.serial is not None:
                raise BatteryUnavailableError(f"No battery with serial number '{self.serial}' found")
            raise BatteryUnavailableError("No battery detected on this system.")

        try:
            self.device_props_interface = await self._get_interface(self.device_path, PROPS_IFACE)
        except (InterfaceNotFoundError, DBusError, OSError) as e:
            raise BatteryUnavailableError(f"Failed to access battery at {self.device_path}: {e}") from e
        logger.debug(f"Using battery at {self.device_path}")

    async def sample(self) -> BatterySample:
        if self.device_props_interface is None:
            await self.connect()

        try:
            props = await self.device_props_interface.call_get_all(DEVICE_IFACE)
        except (DBusError, OSError) as e:
            raise BatteryUnavailableError(f"Failed to access battery information: {e}") from e

        if "Percentage" not in props or "State" not in props:
            raise BatteryUnavailableError("Battery does not report Percentage and State")

        percentage = float(props["Percentage"].value)
        state = int(props["State"].value)
        return BatterySample(
            charge_fraction=min(max(percentage / 100.0, 0.0), 1.0),
            is_charging=state == STATE_CHARGING,
            state=state,
        )
