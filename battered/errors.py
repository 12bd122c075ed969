class BatteredError(Exception):
    """Base class for every error raised by battered."""

    pass


class ConfigError(BatteredError):
    """Exception raised when the configuration file cannot be used."""

    pass


class BatteryUnavailableError(BatteredError):
    """Exception raised when no monitorable battery is found."""

    pass


class CommandError(BatteredError):
    pass


class CommandSpawnError(CommandError):
    pass


class CommandExitError(CommandError):
    def __init__(self, argv, returncode: int) -> None:
        super().__init__(f"Command failed: '{' '.join(argv)}' exited with status {returncode}")
        self.argv = argv
        self.returncode = returncode


class CommandTimeoutError(CommandError):
    pass


class ActionFailedError(BatteredError):
    """Raised when a fired action could not be carried out."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
