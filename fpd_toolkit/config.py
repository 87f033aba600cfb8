"""FPD Toolkit configuration.

Typed defaults for the scaffolder and the validator. Settings use Pydantic v2
models so they are validated at construction time and can be serialised
to/from JSON or read from ``FPD_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from fpd_toolkit.errors import ConfigurationError, MaterializeError


_TRUE_VALUES = {"1", "true", "yes", "on"}


class ToolkitConfig(BaseModel):
    """Global FPD Toolkit configuration.

    Instances are created once by the CLI entry point (usually through
    :meth:`from_env`) and passed explicitly to the generator and validator.
    Nothing reads configuration from module-level state.
    """

    default_author: str = Field(default="Your Name", min_length=1)
    default_organization: str = Field(default="com.example", min_length=1)
    default_platforms: list[str] = Field(default_factory=lambda: ["android", "ios"])
    max_workers: int = Field(
        default=8, ge=1, description="Maximum concurrent file writes during materialization"
    )
    strict_templates: bool = Field(
        default=False,
        description="Raise on unresolved template tokens instead of passing them through",
    )
    fail_on_error: bool = Field(
        default=False,
        description="Make `validate` exit non-zero when error findings are reported",
    )

    @field_validator("default_platforms", mode="before")
    @classmethod
    def _split_platforms(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        return value

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path.

        Raises:
            MaterializeError: The file cannot be written.
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            raise MaterializeError(target, exc.strerror or str(exc)) from exc
        return target

    @classmethod
    def load(cls, path: Path) -> "ToolkitConfig":
        """Load a previously-saved configuration from JSON.

        Raises:
            ConfigurationError: The file cannot be read or holds invalid settings.
        """
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            reason = exc.strerror or str(exc)
            raise ConfigurationError(f"Cannot read config file {path}: {reason}") from exc
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc

    @classmethod
    def from_env(cls, base: Optional["ToolkitConfig"] = None) -> "ToolkitConfig":
        """Build a ``ToolkitConfig`` from environment variables.

        Variables override the values of *base* (a config loaded from file, or
        the defaults).

        Recognised variables (all optional):
            FPD_AUTHOR, FPD_ORGANIZATION, FPD_PLATFORMS, FPD_MAX_WORKERS,
            FPD_STRICT_TEMPLATES, FPD_FAIL_ON_ERROR.

        Raises:
            ConfigurationError: A variable holds an invalid value.
        """
        kwargs: dict[str, Any] = base.model_dump() if base is not None else {}
        if os.environ.get("FPD_AUTHOR"):
            kwargs["default_author"] = os.environ["FPD_AUTHOR"]
        if os.environ.get("FPD_ORGANIZATION"):
            kwargs["default_organization"] = os.environ["FPD_ORGANIZATION"]
        if os.environ.get("FPD_PLATFORMS"):
            kwargs["default_platforms"] = os.environ["FPD_PLATFORMS"]
        if os.environ.get("FPD_MAX_WORKERS"):
            kwargs["max_workers"] = os.environ["FPD_MAX_WORKERS"].strip()
        if os.environ.get("FPD_STRICT_TEMPLATES"):
            kwargs["strict_templates"] = (
                os.environ["FPD_STRICT_TEMPLATES"].strip().lower() in _TRUE_VALUES
            )
        if os.environ.get("FPD_FAIL_ON_ERROR"):
            kwargs["fail_on_error"] = (
                os.environ["FPD_FAIL_ON_ERROR"].strip().lower() in _TRUE_VALUES
            )
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid FPD_* environment setting: {exc}") from exc
