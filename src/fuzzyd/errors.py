"""
Exception hierarchy for fuzzyd.
"""


class FuzzydError(Exception):
    """Base class for errors surfaced to the command line."""


class ConfigError(FuzzydError):
    """Raised when a configuration file cannot be read or validated."""


class LaunchError(FuzzydError):
    """Raised when a selected item cannot be launched."""


class ScoringError(FuzzydError):
    """Raised when ranking produces a non-finite score."""
