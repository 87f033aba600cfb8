"""Exception hierarchy shared by the scaffolder, the validator and the CLI."""

from __future__ import annotations

from pathlib import Path


class ToolkitError(Exception):
    """Base class for every error the toolkit raises on purpose."""


class ConfigurationError(ToolkitError):
    """Invalid project kind, name, platform or option.

    Always raised before any file-system mutation.
    """


class AlreadyExistsError(ToolkitError):
    """A destination is already present and overwriting was not allowed."""

    def __init__(self, path: str | Path, message: str | None = None) -> None:
        self.path = Path(path)
        super().__init__(message or f"Destination already exists: {self.path}")


class MaterializeError(ToolkitError):
    """A file-system operation failed while materializing a plan."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class NotFoundError(MaterializeError):
    """A file expected by a read operation does not exist."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path, "not found")


class ParseError(ToolkitError):
    """The package metadata file could not be read as a key/value mapping."""


class TemplateError(ToolkitError):
    """A template is unknown, or could not be expanded in strict mode."""
