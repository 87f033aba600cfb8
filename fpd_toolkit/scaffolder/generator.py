"""Project creation orchestrator.

Takes a project model and writes the complete project tree: plan, render
every file, then materialize.  Rendering happens entirely before the first
write, so a template error never leaves a half-written project behind.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from fpd_toolkit.config import ToolkitConfig
from fpd_toolkit.errors import AlreadyExistsError
from fpd_toolkit.scaffolder.materializer import (
    ExistingPolicy,
    FileSystemMaterializer,
    Materializer,
    materialize_plan,
)
from fpd_toolkit.scaffolder.models import PlanEntry
from fpd_toolkit.scaffolder.planner import plan_project
from fpd_toolkit.scaffolder.templates import TemplateRenderer
from fpd_toolkit.utils import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.generator")


class GenerationResult(BaseModel):
    """Outcome of :meth:`ProjectGenerator.generate`."""

    root: Path
    directories: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    cancelled: bool = False


def render_plan(entries: list[PlanEntry], renderer: TemplateRenderer) -> dict[str, str]:
    """Render the content of every file entry, keyed by relative path."""
    return {
        entry.path: renderer.render(entry.template, entry.bindings)
        for entry in entries
        if not entry.is_directory and entry.template is not None
    }


class ProjectGenerator:
    """Creates a Flutter/Dart project from a model."""

    def __init__(
        self,
        model: Any,
        config: Optional[ToolkitConfig] = None,
        materializer: Optional[Materializer] = None,
    ) -> None:
        self.model = model
        self.config = config or ToolkitConfig()
        self.renderer = TemplateRenderer(strict=self.config.strict_templates)
        self.materializer = materializer or FileSystemMaterializer()

    # -- Public API --------------------------------------------------------

    def plan(self) -> list[PlanEntry]:
        return plan_project(self.model)

    async def generate(
        self, cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        """Generate the project under ``model.output_root``.

        Raises:
            AlreadyExistsError: The output root is a non-empty directory (or a
                file) and ``model.force`` is not set.
            TemplateError: A template cannot be rendered in strict mode.
            MaterializeError: A directory or file could not be written.
        """
        root = Path(self.model.output_root)

        fs = self.materializer
        if fs.exists(root) and not fs.is_directory(root):
            raise AlreadyExistsError(root, f"Output path is not a directory: {root}")
        if fs.is_directory(root) and fs.list_directory(root) and not self.model.force:
            raise AlreadyExistsError(
                root,
                f"Directory {root} already exists and is not empty. "
                "Use --force to overwrite.",
            )

        entries = self.plan()
        contents = render_plan(entries, self.renderer)
        logger.debug(
            "planned %d entries for %s (%s)", len(entries), self.model.name, self.model.kind.value
        )

        self.materializer.ensure_directory(root)
        outcome = await materialize_plan(
            entries,
            root,
            contents,
            self.materializer,
            existing=ExistingPolicy.OVERWRITE if self.model.force else ExistingPolicy.FAIL,
            max_workers=self.config.max_workers,
            cancel_event=cancel_event,
        )
        return GenerationResult(
            root=root,
            directories=outcome.directories,
            files=outcome.files,
            cancelled=outcome.cancelled,
        )
