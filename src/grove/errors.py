"""Error types raised by grove."""

from __future__ import annotations

from pathlib import Path


class GroveError(Exception):
    """Base class for errors raised by the engine itself."""


class DeclarationError(GroveError):
    """Raised when a group, example or hook is declared incorrectly (developer error)."""


class NoActiveWorldError(GroveError):
    """Raised when a root group is declared outside of a world scope."""

    def __init__(self) -> None:
        super().__init__(
            "No active world. Declare root groups with World.describe() or "
            "inside 'with world_scope(world):'."
        )


class PendingExampleError(GroveError):
    """Raised from an example body to mark the example as pending."""

    def __init__(self, message: str | None = None) -> None:
        self.message = message or "No reason given"
        super().__init__(self.message)


class ConfigError(GroveError):
    """Raised when the [tool.grove] configuration is invalid."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Invalid grove configuration in {path}:\n{cause}")
