import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from dbus_next.aio.message_bus import MessageBus
from dbus_next.constants import BusType
from dbus_next.errors import InterfaceNotFoundError, DBusError
from dbus_next.signature import Variant

NTFY_NAME = "org.freedesktop.Notifications"
NTFY_PATH = "/org/freedesktop/Notifications"
APP_NAME = "battered"

logger = logging.getLogger(__name__)


class Urgency(IntEnum):
    LOW = 0
    NORMAL = 1
    CRITICAL = 2

    @classmethod
    def parse(cls, value: str) -> "Urgency":
        for urgency in cls:
            if urgency.name.lower() == value.strip().lower():
                return urgency
        raise ValueError(f"unknown urgency '{value}', expected Low, Normal or Critical")


@dataclass(frozen=True)
class Timeout:
    """Expiry of a notification in the units the Notify call expects.

    -1 leaves it to the notification server, 0 never expires, anything
    greater is a duration in milliseconds.
    """

    expire_ms: int

    @classmethod
    def milliseconds(cls, ms: int) -> "Timeout":
        if ms <= 0:
            raise ValueError("timeout must be a positive number of milliseconds")
        return cls(ms)

    @classmethod
    def from_config(cls, value: int) -> "Timeout":
        if value < 0:
            return cls.DEFAULT
        if value == 0:
            return cls.NEVER
        return cls.milliseconds(value)


Timeout.DEFAULT = Timeout(-1)
Timeout.NEVER = Timeout(0)


class Notifier:
    def __init__(self) -> None:
        self.interface = None
        self.last_notification_id = 0

    async def connect(self) -> bool:
        try:
            session_bus = await MessageBus(bus_type=BusType.SESSION).connect()
            ntfy_introspect = await session_bus.introspect(NTFY_NAME, NTFY_PATH)
            ntfy_proxy = session_bus.get_proxy_object(
                NTFY_NAME, NTFY_PATH, ntfy_introspect
            )
            self.interface = ntfy_proxy.get_interface(NTFY_NAME)
            return True
        except (InterfaceNotFoundError, DBusError, OSError) as e:
            logger.warning(f"Notification setup failed: {e}")
            return False

    async def send(
        self,
        summary: str,
        body: Optional[str] = None,
        urgency: Urgency = Urgency.NORMAL,
        icon: str = "battery-caution",
        timeout: Timeout = Timeout.DEFAULT,
    ) -> None:
        if not self.interface:
            logger.warning("Notification interface not connected. Cannot send.")
            return

        hints = {"urgency": Variant("y", int(urgency))}

        try:
            new_id = await self.interface.call_notify(
                APP_NAME,
                self.last_notification_id,
                icon,
                summary,
                body or "",
                [],
                hints,
                timeout.expire_ms,
            )
            self.last_notification_id = new_id
        except Exception as e:
            logger.warning(f"Failed to send notification: {e}")
