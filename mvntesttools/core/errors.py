"""Error type raised by the repository tooling."""

from typing import Optional


class TestToolsError(Exception):
    """
    Failure while preparing a test-time local repository.

    Raised for settings resolution, URL conversion, artifact installation,
    and ancestor POM read/install failures. The underlying exception is kept
    on ``cause`` and is also chained with ``raise ... from``.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} ({type(self.cause).__name__}: {self.cause})"
