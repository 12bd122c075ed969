import pytest

from battered.actions import ActionKind, ActionSet, NotificationSpec, ThresholdAction
from battered.errors import CommandExitError, CommandSpawnError
from battered.upower import BatterySample


class FakeNotifier:
    def __init__(self, fail: bool = False, connected: bool = True) -> None:
        self.sent = []
        self.fail = fail
        self.connected = connected
        self.events = None

    async def connect(self):
        return self.connected

    async def send(self, summary, body=None, urgency=None, icon=None, timeout=None):
        if self.events is not None:
            self.events.append("notify")
        if self.fail:
            raise ConnectionError("org.freedesktop.Notifications is not running")
        self.sent.append((summary, body, urgency, icon, timeout))


class FakeRunner:
    def __init__(self, returncode: int = 0, spawn_error: bool = False) -> None:
        self.calls = []
        self.returncode = returncode
        self.spawn_error = spawn_error
        self.events = None

    async def run(self, argv):
        if self.events is not None:
            self.events.append("run")
        self.calls.append(tuple(argv))
        if self.spawn_error:
            raise CommandSpawnError(f"Failed to execute '{' '.join(argv)}': No such file")
        if self.returncode != 0:
            raise CommandExitError(argv, self.returncode)
        return self.returncode


class FakeBattery:
    def __init__(self, samples) -> None:
        self.samples = list(samples)
        self.connected = False

    async def connect(self):
        self.connected = True

    async def sample(self):
        return self.samples.pop(0)


def make_action(threshold, command=None, summary=None, kind=ActionKind.DISCHARGE, **notify):
    notification = NotificationSpec(summary=summary, **notify) if summary is not None else None
    return ThresholdAction(
        threshold=threshold,
        command=tuple(command) if command else None,
        notification=notification,
        kind=kind,
    )


def discharging(charge):
    return BatterySample(charge_fraction=charge, is_charging=False, state=2)


def charging(charge):
    return BatterySample(charge_fraction=charge, is_charging=True, state=1)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def two_levels():
    return ActionSet(
        [
            make_action(0.5, summary="Low battery"),
            make_action(0.2, summary="Critical battery"),
        ]
    )
