"""Project scaffolding: models, planning, templates and materialization."""

from fpd_toolkit.scaffolder.expander import expand, parse, tokenize, variables
from fpd_toolkit.scaffolder.generator import GenerationResult, ProjectGenerator
from fpd_toolkit.scaffolder.materializer import (
    ExistingPolicy,
    FileSystemMaterializer,
    Materializer,
    MaterializeResult,
    materialize_plan,
)
from fpd_toolkit.scaffolder.models import (
    ApplicationProject,
    EntryKind,
    PackageProject,
    PlanEntry,
    Platform,
    PluginProject,
    ProjectKind,
    build_project_model,
    is_valid_package_name,
)
from fpd_toolkit.scaffolder.planner import build_bindings, describe_plan, plan_project
from fpd_toolkit.scaffolder.templates import TEMPLATES, TemplateRenderer

__all__ = [
    "ApplicationProject",
    "EntryKind",
    "ExistingPolicy",
    "FileSystemMaterializer",
    "GenerationResult",
    "MaterializeResult",
    "Materializer",
    "PackageProject",
    "PlanEntry",
    "Platform",
    "PluginProject",
    "ProjectGenerator",
    "ProjectKind",
    "TEMPLATES",
    "TemplateRenderer",
    "build_bindings",
    "build_project_model",
    "describe_plan",
    "expand",
    "is_valid_package_name",
    "materialize_plan",
    "parse",
    "plan_project",
    "tokenize",
    "variables",
]
