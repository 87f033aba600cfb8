"""FPD Toolkit -- scaffolds and validates Flutter/Dart packages.

Two engines make up the toolkit:

* the scaffolder (``fpd_toolkit.scaffolder``) turns a ``ProjectModel`` into a
  plan of files, expands the compiled-in templates and writes them to disk;
* the validator (``fpd_toolkit.validator``) inspects an existing package,
  scores it against a fixed rubric and optionally synthesizes missing files.

Quick usage::

    from fpd_toolkit.scaffolder import ProjectGenerator, build_project_model
    from fpd_toolkit.validator import validate_package

    model = build_project_model("plugin", "geo_sensor", platforms="android,ios")
    result = await ProjectGenerator(model).generate()
    report = await validate_package(result.root)
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
