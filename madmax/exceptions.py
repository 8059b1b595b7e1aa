"""Custom exceptions for MADmax."""


class MadmaxError(Exception):
    """Base exception for all MADmax errors."""

    pass


class ConfigurationError(MadmaxError):
    """Raised when configuration or command line values are invalid."""

    pass


class InputFileError(MadmaxError):
    """Raised when an input file is missing or unreadable."""

    def __init__(self, message="", path=None):
        super().__init__(message)
        self.path = path


class DepthSourceError(MadmaxError):
    """Raised when depth cannot be read from an input (no index, bad table)."""

    pass
