import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .actions import ThresholdAction
from .errors import CommandError
from .template import FormatContext, render

logger = logging.getLogger(__name__)


class Status(Enum):
    OK = "ok"
    NOOP = "noop"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    status: Status
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "Outcome":
        return cls(Status.OK)

    @classmethod
    def noop(cls) -> "Outcome":
        return cls(Status.NOOP)

    @classmethod
    def failed(cls, reason: str) -> "Outcome":
        return cls(Status.FAILED, reason)

    @property
    def is_failure(self) -> bool:
        return self.status is Status.FAILED


class ActionExecutor:
    """Carries out a fired action: notification first, then the command."""

    def __init__(self, notifier, runner) -> None:
        self.notifier = notifier
        self.runner = runner

    async def fire(self, action: ThresholdAction, context: FormatContext) -> Outcome:
        if action.is_null:
            return Outcome.ok()

        spec = action.notification
        if spec is not None:
            summary = render(spec.summary, context)
            body = render(spec.body, context) if spec.body is not None else None
            try:
                await self.notifier.send(summary, body, spec.urgency, spec.icon, spec.timeout)
            except Exception as e:
                # A missing notification service must not stop the command
                logger.warning(f"Notification for {action.threshold:.2f} failed: {e}")

        if action.command is not None:
            try:
                await self.runner.run(action.command)
            except CommandError as e:
                logger.error(str(e))
                return Outcome.failed(str(e))

        return Outcome.ok()
