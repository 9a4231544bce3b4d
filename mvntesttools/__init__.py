"""mvntesttools - Test-support utilities for Maven plugin integration tests."""

__version__ = "0.1.0"

from .core.errors import TestToolsError
from .core.stager import RepositoryTool

__all__ = ["RepositoryTool", "TestToolsError"]
