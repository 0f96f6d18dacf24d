"""
Error types for Langterm. Every fatal condition maps to one of these and
ends the run with a single human-readable line.
"""

from typing import Optional


class LangtermError(Exception):
    """Base class for fatal, user-facing errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class ServiceUnavailableError(LangtermError):
    pass


class NoModelsError(LangtermError):
    pass


class EmptyInstructionError(LangtermError):
    pass


class GenerationError(LangtermError):
    pass


class CommandFailedError(LangtermError):
    """The executed command exited non-zero or could not be spawned."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode
