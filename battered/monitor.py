import asyncio
import logging

from .errors import ActionFailedError
from .executor import ActionExecutor, Outcome
from .matcher import ThresholdMatcher
from .notify import Timeout, Urgency
from .template import build_context
from .upower import BatterySample

logger = logging.getLogger(__name__)


class BatteryMonitor:
    def __init__(
        self,
        battery,
        notifier,
        matcher: ThresholdMatcher,
        executor: ActionExecutor,
        interval: float,
    ) -> None:
        self.battery = battery
        self.notifier = notifier
        self.matcher = matcher
        self.executor = executor
        self.interval = interval

    async def evaluate_state(self, sample: BatterySample) -> Outcome:
        logger.info(f"Charge: {sample.charge_fraction:.2f}")
        logger.info(f"State:  {sample.state_name}")

        action = self.matcher.step(sample.charge_fraction, sample.is_charging)
        if action is None:
            return Outcome.noop()

        outcome = await self.executor.fire(action, build_context(sample.charge_fraction))
        if outcome.is_failure:
            try:
                await self.notifier.send(
                    "Battered action failed",
                    outcome.reason,
                    Urgency.CRITICAL,
                    "dialog-error",
                    Timeout.DEFAULT,
                )
            except Exception as e:
                logger.warning(f"Failed to send failure notification: {e}")
            raise ActionFailedError(outcome.reason)
        return outcome

    async def tick(self) -> Outcome:
        sample = await self.battery.sample()
        return await self.evaluate_state(sample)

    async def start(self) -> None:
        # 1. Setup Connections
        if not await self.notifier.connect():
            logger.warning("Notification service unavailable.")
        await self.battery.connect()

        logger.debug(f"Battery monitor running every {self.interval}s with {self.matcher.actions!r}")

        # 2. Poll until an action fails or the battery disappears
        while True:
            await self.tick()
            await asyncio.sleep(self.interval)
