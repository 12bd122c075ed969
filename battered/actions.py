"""Threshold rules and the ordered set the matcher scans."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple

from .errors import ConfigError
from .notify import Timeout, Urgency

DEFAULT_ICON = "battery-caution"


class ActionKind(Enum):
    DISCHARGE = "discharge"
    CHARGING = "charging"


@dataclass(frozen=True)
class NotificationSpec:
    summary: str
    body: Optional[str] = None
    urgency: Urgency = Urgency.NORMAL
    icon: str = DEFAULT_ICON
    timeout: Timeout = Timeout.DEFAULT


@dataclass(frozen=True)
class ThresholdAction:
    threshold: float
    command: Optional[Tuple[str, ...]] = None
    notification: Optional[NotificationSpec] = None
    kind: ActionKind = ActionKind.DISCHARGE

    def matches(self, charge_fraction: float) -> bool:
        # Discharge rules trigger below the threshold, charging rules at or above it
        if self.kind is ActionKind.CHARGING:
            return charge_fraction >= self.threshold
        return charge_fraction < self.threshold

    @property
    def is_null(self) -> bool:
        return self.command is None and self.notification is None


class ActionSet:
    """Discharge actions sorted by ascending threshold.

    The lowest threshold is the most severe one, so a scan in iteration
    order always meets the most severe matching rule first. An optional
    ``on_charge`` action is kept beside the sorted list.
    """

    def __init__(
        self,
        actions: Sequence[ThresholdAction],
        on_charge: Optional[ThresholdAction] = None,
    ) -> None:
        for action in actions:
            _check_threshold(action)
            if action.kind is not ActionKind.DISCHARGE:
                raise ConfigError("charging actions cannot be mixed into the discharge list")
        if on_charge is not None:
            _check_threshold(on_charge)
            if on_charge.kind is not ActionKind.CHARGING:
                raise ConfigError("the charging action must be of kind 'charging'")

        self._actions: Tuple[ThresholdAction, ...] = tuple(
            sorted(actions, key=lambda a: a.threshold)
        )
        self._on_charge = on_charge

    @property
    def on_charge(self) -> Optional[ThresholdAction]:
        return self._on_charge

    def __iter__(self) -> Iterator[ThresholdAction]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __getitem__(self, index: int) -> ThresholdAction:
        return self._actions[index]

    def __repr__(self) -> str:
        thresholds = ", ".join(f"{a.threshold:.2f}" for a in self._actions)
        return f"ActionSet([{thresholds}], on_charge={self.on_charge is not None})"


def _check_threshold(action: ThresholdAction) -> None:
    if not 0.0 <= action.threshold <= 1.0:
        raise ConfigError("value must be between 0 and 1")
