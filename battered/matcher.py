import logging
from typing import Optional

from .actions import ActionSet, ThresholdAction

logger = logging.getLogger(__name__)


class ThresholdMatcher:
    """Decides which action, if any, fires on a tick.

    The only state is the index of the discharge action that fired last.
    An action is not fired again while it stays the most severe match; a
    different index matching, or the device being seen charging, re-arms
    the matcher.

    Charge climbing back above every threshold while still discharging
    does not clear the index. Dropping back to the same rule afterwards
    is therefore treated as already handled.
    """

    def __init__(self, actions: ActionSet) -> None:
        self.actions = actions
        self.last_fired_index: Optional[int] = None

    @property
    def armed(self) -> bool:
        return self.last_fired_index is None

    def reset(self) -> None:
        self.last_fired_index = None

    def step(self, charge_fraction: float, is_charging: bool) -> Optional[ThresholdAction]:
        if is_charging:
            return self._on_charging(charge_fraction)

        for i, action in enumerate(self.actions):
            if not action.matches(charge_fraction):
                continue

            if i == self.last_fired_index:
                logger.debug(f"Action {i} ({action.threshold:.2f}) already fired, skipping")
                return None

            logger.info(f"Charge {charge_fraction:.2f} below {action.threshold:.2f}, firing action {i}")
            self.last_fired_index = i
            return action

        return None

    def _on_charging(self, charge_fraction: float) -> Optional[ThresholdAction]:
        was_fired = not self.armed
        self.reset()

        on_charge = self.actions.on_charge
        if was_fired and on_charge is not None and on_charge.matches(charge_fraction):
            logger.info("Charger connected after a discharge action, firing charging action")
            return on_charge
        return None
