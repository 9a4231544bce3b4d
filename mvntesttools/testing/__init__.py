"""Helpers for plugin tests: temp files, file assertions and mock controls."""

from .files import TestFileManager
from .mocks import MockControl, MockManager, MockStateError

__all__ = ["MockControl", "MockManager", "MockStateError", "TestFileManager"]
