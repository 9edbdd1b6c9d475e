# src/tddguard/exceptions.py

"""
Custom exceptions for tddguard.
"""


class TddGuardError(Exception):
    """Base class for all tddguard errors."""

    pass


class ConfigurationError(TddGuardError):
    """Raised for invalid settings, such as an unknown tool profile."""

    pass


class TestLaunchError(TddGuardError):
    """Raised when the wrapped test tool cannot be started at all."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        details: Exception | None = None,
    ):
        self.command = command
        self.details = details
        full_message = f"[Supervisor] {message}"
        if command:
            full_message += f" (Command: '{' '.join(command)}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


# 🔼⚙️
