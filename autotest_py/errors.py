"""Exception types raised by autotest_py."""


class AutotestError(Exception):
    """Base class for all autotest_py errors."""


class UnknownStatusCode(AutotestError, ValueError):
    """The grading service answered with a status code outside the agreed set."""

    def __init__(self, kind: str, code):
        self.kind = kind
        self.code = code
        super().__init__(f"Unknown {kind} status code: {code!r}")


class RemoteServiceFailure(AutotestError):
    """A request to the grading service failed or returned garbage."""


class MalformedResultsFile(AutotestError, ValueError):
    """A task definition or results file does not contain valid JSON."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Malformed file {path}: {reason}")


class SessionActiveError(AutotestError):
    """Attempt to replace a session that is still being polled."""
