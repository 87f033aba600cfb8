"""Pydantic v2 models describing the project to scaffold.

A project is one of three closed variants, discriminated on ``kind``:

* :class:`ApplicationProject` -- a runnable Flutter app with per-platform
  runner stubs;
* :class:`PluginProject` -- a Flutter plugin (library component) with a
  platform interface, a method-channel implementation and native stubs;
* :class:`PackageProject` -- a pure Dart package, which carries no platforms.

Models are frozen: build one with :func:`build_project_model` and pass it
around by value.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fpd_toolkit.config import ToolkitConfig
from fpd_toolkit.errors import ConfigurationError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ProjectKind(str, enum.Enum):
    """The closed set of project kinds the toolkit can create."""

    APPLICATION = "application"
    LIBRARY_COMPONENT = "library-component"
    PURE_LIBRARY = "pure-library"

    @property
    def alias(self) -> str:
        """Short command-line name (``app``, ``plugin``, ``package``)."""
        return _KIND_ALIASES_REVERSE[self]

    @property
    def label(self) -> str:
        return {
            ProjectKind.APPLICATION: "application",
            ProjectKind.LIBRARY_COMPONENT: "plugin",
            ProjectKind.PURE_LIBRARY: "package",
        }[self]

    @classmethod
    def parse(cls, value: "str | ProjectKind") -> "ProjectKind":
        """Resolve a kind from its value or its short alias.

        Raises:
            ConfigurationError: If *value* names no known kind.
        """
        if isinstance(value, ProjectKind):
            return value
        key = str(value).strip().lower()
        if key in _KIND_ALIASES:
            return _KIND_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(sorted({*(k.value for k in cls), *_KIND_ALIASES}))
            raise ConfigurationError(
                f"Unknown project kind '{value}'. Expected one of: {choices}"
            ) from None

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any]) -> "ProjectKind":
        """Detect the kind of an existing project from its parsed pubspec.

        A ``flutter.plugin`` section means a plugin, any other ``flutter``
        dependency or section means an application, everything else is a
        pure Dart package.
        """
        flutter = metadata.get("flutter")
        if isinstance(flutter, Mapping) and "plugin" in flutter:
            return cls.LIBRARY_COMPONENT
        dependencies = metadata.get("dependencies")
        if flutter is not None or (
            isinstance(dependencies, Mapping) and "flutter" in dependencies
        ):
            return cls.APPLICATION
        return cls.PURE_LIBRARY


_KIND_ALIASES: dict[str, ProjectKind] = {
    "app": ProjectKind.APPLICATION,
    "plugin": ProjectKind.LIBRARY_COMPONENT,
    "package": ProjectKind.PURE_LIBRARY,
}
_KIND_ALIASES_REVERSE = {kind: alias for alias, kind in _KIND_ALIASES.items()}


class Platform(str, enum.Enum):
    """Target platforms a Flutter app or plugin can support."""

    ANDROID = "android"
    IOS = "ios"
    WEB = "web"
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"


DEFAULT_PLATFORMS: tuple[Platform, ...] = (Platform.ANDROID, Platform.IOS)


def parse_platforms(value: str | Iterable[str | Platform]) -> tuple[Platform, ...]:
    """Parse a comma-separated string (or iterable) of platform tags.

    Duplicates are dropped, keeping the first occurrence.

    Raises:
        ConfigurationError: On an unknown tag.
    """
    raw = value.split(",") if isinstance(value, str) else list(value)
    result: list[Platform] = []
    for item in raw:
        tag = item.value if isinstance(item, Platform) else str(item).strip().lower()
        if not tag:
            continue
        try:
            platform = Platform(tag)
        except ValueError:
            choices = ", ".join(p.value for p in Platform)
            raise ConfigurationError(
                f"Unknown platform '{tag}'. Supported platforms: {choices}"
            ) from None
        if platform not in result:
            result.append(platform)
    return tuple(result)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_ORGANIZATION_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+$")


def is_valid_package_name(name: str) -> bool:
    """Return ``True`` if *name* is a valid Dart package identifier.

    Lowercase letters, digits and underscores, starting with a letter, with
    no leading, trailing or doubled underscore.
    """
    return (
        bool(_NAME_RE.match(name))
        and not name.endswith("_")
        and "__" not in name
    )


def is_valid_organization(organization: str) -> bool:
    """Return ``True`` for a reverse-domain identifier such as ``com.example``."""
    return bool(_ORGANIZATION_RE.match(organization))


# ---------------------------------------------------------------------------
# Project variants
# ---------------------------------------------------------------------------


class _ProjectBase(BaseModel):
    """Fields shared by every project kind."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Dart package identifier")
    description: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    organization: str = Field(..., description="Reverse-domain identifier")
    output_root: Path = Field(..., description="Directory the project is written to")
    force: bool = Field(default=False, description="Allow overwriting existing content")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not is_valid_package_name(value):
            raise ValueError(f"invalid package name '{value}'")
        return value

    @field_validator("organization")
    @classmethod
    def _check_organization(cls, value: str) -> str:
        if not is_valid_organization(value):
            raise ValueError(f"invalid organization '{value}'")
        return value


class ApplicationProject(_ProjectBase):
    kind: Literal[ProjectKind.APPLICATION] = ProjectKind.APPLICATION
    platforms: tuple[Platform, ...] = DEFAULT_PLATFORMS


class PluginProject(_ProjectBase):
    kind: Literal[ProjectKind.LIBRARY_COMPONENT] = ProjectKind.LIBRARY_COMPONENT
    platforms: tuple[Platform, ...] = Field(default=DEFAULT_PLATFORMS, min_length=1)


class PackageProject(_ProjectBase):
    kind: Literal[ProjectKind.PURE_LIBRARY] = ProjectKind.PURE_LIBRARY


ProjectModel = Annotated[
    Union[ApplicationProject, PluginProject, PackageProject],
    Field(discriminator="kind"),
]

_VARIANTS: dict[ProjectKind, type[_ProjectBase]] = {
    ProjectKind.APPLICATION: ApplicationProject,
    ProjectKind.LIBRARY_COMPONENT: PluginProject,
    ProjectKind.PURE_LIBRARY: PackageProject,
}

DEFAULT_DESCRIPTIONS: dict[ProjectKind, str] = {
    ProjectKind.APPLICATION: "A new Flutter application.",
    ProjectKind.LIBRARY_COMPONENT: "A new Flutter plugin.",
    ProjectKind.PURE_LIBRARY: "A new Dart package.",
}


def platforms_of(model: _ProjectBase) -> tuple[Platform, ...]:
    """Platforms a model targets; empty for pure Dart packages."""
    return tuple(getattr(model, "platforms", ()))


def build_project_model(
    kind: str | ProjectKind,
    name: str,
    *,
    description: Optional[str] = None,
    author: Optional[str] = None,
    organization: Optional[str] = None,
    platforms: str | Iterable[str | Platform] | None = None,
    output_root: str | Path | None = None,
    force: bool = False,
    config: Optional[ToolkitConfig] = None,
) -> Union[ApplicationProject, PluginProject, PackageProject]:
    """Validate the user's options and build the matching project variant.

    Missing options fall back to *config* (or the built-in defaults).

    Raises:
        ConfigurationError: On an unknown kind, an invalid name, organization
            or platform tag, or a plugin without platforms.
    """
    config = config or ToolkitConfig()
    project_kind = ProjectKind.parse(kind)

    if not is_valid_package_name(name):
        raise ConfigurationError(
            f"Invalid package name '{name}'. Use lowercase letters, digits and "
            "underscores, starting with a letter (e.g. my_package)."
        )

    organization = organization or config.default_organization
    if not is_valid_organization(organization):
        raise ConfigurationError(
            f"Invalid organization '{organization}'. Use a reverse-domain "
            "identifier such as com.example."
        )

    fields: dict[str, Any] = {
        "name": name,
        "description": description or DEFAULT_DESCRIPTIONS[project_kind],
        "author": author or config.default_author,
        "organization": organization,
        "output_root": Path(output_root) if output_root is not None else Path(name),
        "force": force,
    }

    if project_kind is not ProjectKind.PURE_LIBRARY:
        selected = parse_platforms(
            platforms if platforms is not None else config.default_platforms
        )
        if not selected:
            if project_kind is ProjectKind.LIBRARY_COMPONENT:
                raise ConfigurationError("A plugin needs at least one platform")
            selected = DEFAULT_PLATFORMS
        fields["platforms"] = selected

    try:
        return _VARIANTS[project_kind](**fields)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Plan entries
# ---------------------------------------------------------------------------


class EntryKind(str, enum.Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class PlanEntry:
    """One directory or file the scaffolder will create.

    ``path`` is a POSIX path relative to the output root.  File entries name
    the template that produces their content and the bindings to expand it
    with; directory entries carry neither.
    """

    path: str
    kind: EntryKind
    template: Optional[str] = None
    bindings: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY
