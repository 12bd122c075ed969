import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .config import default_config_path, load_config
from .errors import ActionFailedError, BatteryUnavailableError, ConfigError
from .executor import ActionExecutor
from .matcher import ThresholdMatcher
from .monitor import BatteryMonitor
from .notify import Notifier
from .process import ProcessRunner
from .upower import UPowerBattery

logger = logging.getLogger("battered")


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of seconds, got {number}")
    return number


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="battered",
        description="Battered polls the battery charge through UPower and runs commands or sends notifications when it drops below configured levels",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debugging mode")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to the config file (default: $XDG_CONFIG_HOME/battered/config.toml)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=positive_int,
        default=None,
        help="Override the polling interval in seconds",
    )
    return parser.parse_args(argv)


def build_monitor(config, interval=None) -> BatteryMonitor:
    notifier = Notifier()
    return BatteryMonitor(
        battery=UPowerBattery(serial=config.serial),
        notifier=notifier,
        matcher=ThresholdMatcher(config.actions),
        executor=ActionExecutor(notifier, ProcessRunner(timeout=config.command_timeout)),
        interval=interval if interval is not None else config.interval,
    )


async def run(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config or default_config_path())
        monitor = build_monitor(config, args.interval)
        await monitor.start()
    except ConfigError as e:
        logger.error(f"Failed to read config: {e}")
        return 1
    except BatteryUnavailableError as e:
        logger.error(f"System: {e}")
        return 1
    except ActionFailedError as e:
        logger.error(f"Action failed: {e}")
        return 1
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level="DEBUG" if args.debug else "INFO")

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Service stopped by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
