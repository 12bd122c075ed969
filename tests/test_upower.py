import pytest
from dbus_next.errors import DBusError
from dbus_next.signature import Variant

from battered import upower
from battered.errors import BatteryUnavailableError
from battered.upower import UPowerBattery

DEVICES = {
    "/org/freedesktop/UPower/devices/line_power_AC": {"Type": 1, "IsPresent": False, "Serial": ""},
    "/org/freedesktop/UPower/devices/battery_BAT0": {"Type": 2, "IsPresent": True, "Serial": "111"},
    "/org/freedesktop/UPower/devices/battery_BAT1": {"Type": 2, "IsPresent": True, "Serial": " 222 "},
}


class FakeProps:
    def __init__(self, values, fail=False):
        self.values = values
        self.fail = fail

    async def call_get_all(self, interface):
        if self.fail:
            raise DBusError("org.freedesktop.DBus.Error.ServiceUnknown", "gone")
        return {name: Variant(_signature(value), value) for name, value in self.values.items()}


class FakeUPower:
    async def call_enumerate_devices(self):
        return list(DEVICES)


class FakeBus:
    async def connect(self):
        return self


def _signature(value):
    if isinstance(value, bool):
        return "b"
    if isinstance(value, int):
        return "u"
    if isinstance(value, float):
        return "d"
    return "s"


@pytest.fixture
def fake_bus(monkeypatch):
    monkeypatch.setattr(upower, "MessageBus", lambda bus_type: FakeBus())

    async def get_interface(self, path, interface):
        if path == upower.UPOWER_PATH:
            return FakeUPower()
        return FakeProps(DEVICES[path])

    monkeypatch.setattr(UPowerBattery, "_get_interface", get_interface)


@pytest.mark.asyncio
async def test_connect_picks_first_battery(fake_bus):
    battery = UPowerBattery()
    await battery.connect()
    assert battery.device_path.endswith("battery_BAT0")


@pytest.mark.asyncio
async def test_connect_selects_by_serial(fake_bus):
    battery = UPowerBattery(serial="222")
    await battery.connect()
    assert battery.device_path.endswith("battery_BAT1")


@pytest.mark.asyncio
async def test_connect_unknown_serial(fake_bus):
    with pytest.raises(BatteryUnavailableError, match="serial number '999'"):
        await UPowerBattery(serial="999").connect()


@pytest.mark.asyncio
async def test_sample_converts_percentage_and_state():
    battery = UPowerBattery()
    battery.device_props_interface = FakeProps({"Percentage": 42.0, "State": 2})

    sample = await battery.sample()
    assert sample.charge_fraction == pytest.approx(0.42)
    assert not sample.is_charging
    assert sample.state_name == "Discharging"


@pytest.mark.asyncio
async def test_sample_reports_charging():
    battery = UPowerBattery()
    battery.device_props_interface = FakeProps({"Percentage": 100.0, "State": 1})

    sample = await battery.sample()
    assert sample.charge_fraction == 1.0
    assert sample.is_charging


@pytest.mark.asyncio
async def test_sample_bus_error():
    battery = UPowerBattery()
    battery.device_props_interface = FakeProps({}, fail=True)
    with pytest.raises(BatteryUnavailableError):
        await battery.sample()


@pytest.mark.asyncio
async def test_sample_missing_properties():
    battery = UPowerBattery()
    battery.device_props_interface = FakeProps({"Percentage": 50.0})
    with pytest.raises(BatteryUnavailableError):
        await battery.sample()


@pytest.mark.asyncio
async def test_connect_wraps_errors_on_selected_device(fake_bus, monkeypatch):
    async def get_interface(self, path, interface):
        if path == upower.UPOWER_PATH:
            return FakeUPower()
        if self.device_path is not None:
            raise DBusError("org.freedesktop.DBus.Error.ServiceUnknown", "gone")
        return FakeProps(DEVICES[path])

    monkeypatch.setattr(UPowerBattery, "_get_interface", get_interface)

    with pytest.raises(BatteryUnavailableError, match="battery_BAT0"):
        await UPowerBattery().connect()
