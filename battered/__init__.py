"""Run commands and show notifications when the battery runs low."""

__version__ = "0.3.0"
