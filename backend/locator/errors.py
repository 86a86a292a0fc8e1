class LocatorError(Exception):
    """Base class for errors that abort a locate run."""


class ConfigurationError(LocatorError):
    """Missing or invalid run parameters."""


class ResourceOpenError(LocatorError):
    """
    A sequence, index or output file could not be opened, read or decoded.

    Fatal: the run stops and no output is written.
    """

    def __init__(self, path: str, reason: str = None):
        self.path = path
        self.reason = reason
        message = f"could not open file '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
