"""Loading and validation of the TOML configuration file.

The file lives at ``$XDG_CONFIG_HOME/battered/config.toml``::

    interval = 60

    [[action]]
    percentage = 0.1
    command = "systemctl suspend"
    [action.notify]
    summary = "Battery at $percentage%"
    urgency = "Critical"
"""

import logging
import os
import shlex
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

from .actions import DEFAULT_ICON, ActionKind, ActionSet, NotificationSpec, ThresholdAction
from .errors import ConfigError
from .notify import Timeout, Urgency

DEFAULT_INTERVAL = 60
# Notify takes the expiry as a signed 32-bit integer
MAX_TIMEOUT_MS = 2**31 - 1

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    actions: ActionSet
    interval: int = DEFAULT_INTERVAL
    serial: Optional[str] = None
    command_timeout: Optional[float] = None


def xdg_config_home() -> Path:
    # Without $HOME there is no sensible location, /.config is as good as any
    config_path = os.environ.get(
        "XDG_CONFIG_HOME", f"{os.environ.get('HOME', '')}/.config"
    )
    return Path(config_path)


def default_config_path() -> Path:
    return xdg_config_home() / "battered" / "config.toml"


def load_config(config_path: Path) -> Config:
    try:
        config_values = Path(config_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning(f"Config file not found at '{config_path}'; falling back to defaults")
        config_values = ""
    except OSError as e:
        raise ConfigError(f"Failed to read config at '{config_path}': {e}") from e

    try:
        return parse_config(config_values)
    except ConfigError as e:
        raise ConfigError(f"Failed to parse config at '{config_path}': {e}") from e


def parse_config(text: str) -> Config:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(e)) from e

    interval = data.get("interval", DEFAULT_INTERVAL)
    if not _is_int(interval):
        raise ConfigError(f"invalid type: expected integer seconds for 'interval', got {interval!r}")
    if interval <= 0:
        raise ConfigError("interval must be a positive number of seconds")

    serial = data.get("serial")
    if serial is not None and not isinstance(serial, str):
        raise ConfigError(f"invalid type: expected string for 'serial', got {serial!r}")

    command_timeout = data.get("command_timeout")
    if command_timeout is not None:
        if not _is_number(command_timeout):
            raise ConfigError(
                f"invalid type: expected seconds for 'command_timeout', got {command_timeout!r}"
            )
        if command_timeout <= 0:
            raise ConfigError("command_timeout must be a positive number of seconds")

    if "action" not in data:
        raise ConfigError("missing field 'action'")
    entries = data["action"]
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ConfigError("invalid type: expected an array of [[action]] tables")

    actions = [_parse_action(entry, ActionKind.DISCHARGE) for entry in entries]

    on_charge = None
    if "charging" in data:
        if not isinstance(data["charging"], dict):
            raise ConfigError("invalid type: expected a [charging] table")
        on_charge = _parse_action(data["charging"], ActionKind.CHARGING)

    return Config(
        actions=ActionSet(actions, on_charge=on_charge),
        interval=interval,
        serial=serial.strip() if serial is not None else None,
        command_timeout=command_timeout,
    )


def _parse_action(entry: dict, kind: ActionKind) -> ThresholdAction:
    if kind is ActionKind.CHARGING:
        percentage = entry.get("percentage", 0.0)
    elif "percentage" in entry:
        percentage = entry["percentage"]
    else:
        raise ConfigError("missing field 'percentage'")

    command = None
    if "command" in entry:
        command = _parse_command(entry["command"])

    notification = None
    if "notify" in entry:
        if not isinstance(entry["notify"], dict):
            raise ConfigError("invalid type: expected a notify table")
        notification = _parse_notify(entry["notify"])

    return ThresholdAction(
        threshold=_parse_percentage(percentage),
        command=command,
        notification=notification,
        kind=kind,
    )


def _parse_percentage(value: Any) -> float:
    if not _is_number(value):
        raise ConfigError(f"invalid type: expected a float for 'percentage', got {value!r}")
    if not 0.0 <= value <= 1.0:
        raise ConfigError("value must be between 0 and 1")
    return float(value)


def _parse_command(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, str):
        raise ConfigError(f"invalid type: expected a string for 'command', got {value!r}")
    try:
        command = shlex.split(value)
    except ValueError as e:
        raise ConfigError(f"Failed to split command: {e}") from e
    if not command:
        raise ConfigError("command must not be empty")
    return tuple(command)


def _parse_notify(table: dict) -> NotificationSpec:
    urgency = Urgency.NORMAL
    if "urgency" in table:
        value = table["urgency"]
        if not isinstance(value, str):
            raise ConfigError(f"invalid type: expected a string for 'urgency', got {value!r}")
        try:
            urgency = Urgency.parse(value)
        except ValueError as e:
            raise ConfigError(f"Failed to parse notification urgency: {e}") from e

    timeout = Timeout.DEFAULT
    if "timeout" in table:
        value = table["timeout"]
        if not _is_int(value):
            raise ConfigError(f"invalid type: expected an integer for 'timeout', got {value!r}")
        if value > MAX_TIMEOUT_MS:
            raise ConfigError(f"invalid value: 'timeout' must not exceed {MAX_TIMEOUT_MS}, got {value}")
        timeout = Timeout.from_config(value)

    icon = table.get("icon", DEFAULT_ICON)
    if not isinstance(icon, str):
        raise ConfigError(f"invalid type: expected a string for 'icon', got {icon!r}")

    body = table.get("body")
    if body is not None and not isinstance(body, str):
        raise ConfigError(f"invalid type: expected a string for 'body', got {body!r}")

    if "summary" not in table:
        raise ConfigError("missing field 'summary'")
    summary = table["summary"]
    if not isinstance(summary, str):
        raise ConfigError(f"invalid type: expected a string for 'summary', got {summary!r}")

    return NotificationSpec(
        summary=summary, body=body, urgency=urgency, icon=icon, timeout=timeout
    )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
