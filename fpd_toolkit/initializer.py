"""Bring an existing Flutter/Dart project up to the toolkit's conventions.

The project kind and name are detected from ``pubspec.yaml``; the planned
files (lint options, CI workflow, docs, test placeholder, ``.gitignore``) are
then written in place.  Existing files are left alone unless ``force`` is set,
and even then ``CHANGELOG.md`` and ``LICENSE`` are never replaced.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from fpd_toolkit.config import ToolkitConfig
from fpd_toolkit.errors import ConfigurationError, ParseError
from fpd_toolkit.scaffolder.generator import render_plan
from fpd_toolkit.scaffolder.materializer import (
    ExistingPolicy,
    FileSystemMaterializer,
    Materializer,
    materialize_plan,
)
from fpd_toolkit.scaffolder.models import PlanEntry, ProjectKind
from fpd_toolkit.scaffolder.planner import init_entries
from fpd_toolkit.scaffolder.templates import TemplateRenderer
from fpd_toolkit.utils import LOGGER_NAME
from fpd_toolkit.validator.rules import METADATA_FILE, RuleContext, build_context

logger = logging.getLogger(f"{LOGGER_NAME}.initializer")

PRESERVED_FILES = frozenset({"CHANGELOG.md", "LICENSE"})


class InitResult(BaseModel):
    """Outcome of :meth:`ProjectInitializer.initialize`."""

    root: Path
    project_kind: ProjectKind
    project_name: Optional[str] = None
    directories: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    cancelled: bool = False


class ProjectInitializer:
    """Adds tooling and documentation to a project that already exists.

    Usage::

        initializer = ProjectInitializer()
        result = await initializer.initialize("./my_app", ci=False)
    """

    def __init__(
        self,
        config: Optional[ToolkitConfig] = None,
        materializer: Optional[Materializer] = None,
    ) -> None:
        self.config = config or ToolkitConfig()
        self.materializer = materializer or FileSystemMaterializer()
        self.renderer = TemplateRenderer(strict=self.config.strict_templates)

    def plan(
        self,
        root: str | Path,
        *,
        analysis: bool = True,
        ci: bool = True,
        docs: bool = True,
        tests: bool = True,
    ) -> tuple[RuleContext, list[PlanEntry]]:
        """Detect the project under *root* and plan the files to add.

        Raises:
            ConfigurationError: *root* is not a directory or has no metadata.
            ParseError: The metadata file is not a valid key/value mapping.
        """
        root = Path(root)
        if not self.materializer.is_directory(root):
            raise ConfigurationError(f"Not a directory: {root}")
        if not self.materializer.exists(root / METADATA_FILE):
            raise ConfigurationError(
                f"No {METADATA_FILE} found in {root}. Run init from the project root."
            )

        ctx = build_context(root, False, self.materializer, self.config)
        if ctx.metadata_error is not None:
            raise ParseError(ctx.metadata_error)

        entries = init_entries(
            ctx.bindings,
            analysis=analysis,
            ci=ci,
            docs=docs,
            tests=tests,
            has_name=ctx.name is not None,
        )
        logger.debug("detected %s project %s", ctx.kind.value, ctx.name or "<unnamed>")
        return ctx, entries

    async def initialize(
        self,
        root: str | Path,
        *,
        force: bool = False,
        analysis: bool = True,
        ci: bool = True,
        docs: bool = True,
        tests: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> InitResult:
        """Write the planned files into the project under *root*.

        Raises:
            ConfigurationError: *root* is not a directory or has no metadata.
            ParseError: The metadata file cannot be parsed.
            TemplateError: A template cannot be rendered in strict mode.
            MaterializeError: A directory or file could not be written.
        """
        root = Path(root)
        ctx, entries = await asyncio.to_thread(
            self.plan, root, analysis=analysis, ci=ci, docs=docs, tests=tests
        )
        contents = render_plan(entries, self.renderer)

        result = InitResult(root=root, project_kind=ctx.kind, project_name=ctx.name)
        replaceable = [e for e in entries if e.path not in PRESERVED_FILES]
        preserved = [e for e in entries if e.path in PRESERVED_FILES]
        batches = [
            (replaceable, ExistingPolicy.OVERWRITE if force else ExistingPolicy.SKIP),
            (preserved, ExistingPolicy.SKIP),
        ]
        for batch, policy in batches:
            if not batch:
                continue
            outcome = await materialize_plan(
                batch,
                root,
                contents,
                self.materializer,
                existing=policy,
                max_workers=self.config.max_workers,
                cancel_event=cancel_event,
            )
            result.directories.extend(outcome.directories)
            result.files.extend(outcome.files)
            result.skipped.extend(outcome.skipped)
            if outcome.cancelled:
                result.cancelled = True
                break
        return result
