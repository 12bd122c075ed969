import asyncio
import logging
from typing import Optional, Sequence

from .errors import CommandExitError, CommandSpawnError, CommandTimeoutError

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs action commands as child processes, without a shell."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    async def run(self, argv: Sequence[str]) -> int:
        if not argv:
            raise CommandSpawnError("Cannot execute an empty command")

        command_line = " ".join(argv)
        logger.debug(f"Executing '{command_line}'")

        try:
            proc = await asyncio.create_subprocess_exec(*argv)
        except (OSError, ValueError) as e:
            raise CommandSpawnError(f"Failed to execute '{command_line}': {e}") from e

        try:
            returncode = await asyncio.wait_for(proc.wait(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise CommandTimeoutError(
                f"Command '{command_line}' did not finish within {self.timeout} seconds"
            )

        if returncode != 0:
            raise CommandExitError(argv, returncode)
        return returncode
