"""Exception types raised by procwarden."""


class ProcwardenError(Exception):
    """Base class for all procwarden errors."""


class ConfigurationError(ProcwardenError):
    """
    A condition or watch is missing required settings or has invalid ones.
    Raised at setup time; a condition that fails validation must not be polled.
    """

    def __init__(self, message: str, problems=None):
        super().__init__(message)
        self.problems = list(problems or [message])


class InvalidPidFile(ProcwardenError):
    """The PID file is missing, unreadable or does not contain an integer."""

    def __init__(self, path, reason: str):
        super().__init__(f"Invalid PID file '{path}': {reason}")
        self.path = path
        self.reason = reason


class ProcessAbsent(ProcwardenError):
    """The process no longer exists (or never did) when it was measured."""

    def __init__(self, pid: int):
        super().__init__(f"No such process: {pid}")
        self.pid = pid


ProcessNotFound = ProcessAbsent
