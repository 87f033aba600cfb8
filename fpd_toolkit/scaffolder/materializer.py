"""File-system boundary of the scaffolder.

:class:`Materializer` is the capability surface the generator and the
validator's auto-fix step depend on; :class:`FileSystemMaterializer` is the
``pathlib`` implementation.  :func:`materialize_plan` drives a materializer
over a plan: directories first (sequentially), then files concurrently on a
bounded pool of worker threads.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
import tempfile
import threading
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from fpd_toolkit.errors import AlreadyExistsError, MaterializeError, NotFoundError
from fpd_toolkit.scaffolder.models import PlanEntry
from fpd_toolkit.utils import LOGGER_NAME

logger = logging.getLogger(f"{LOGGER_NAME}.materializer")


# ---------------------------------------------------------------------------
# Capability interface
# ---------------------------------------------------------------------------


@runtime_checkable
class Materializer(Protocol):
    """Operations the toolkit needs from a file system.

    Implementations raise :class:`AlreadyExistsError`, :class:`NotFoundError`
    or :class:`MaterializeError`; callers never retry.
    """

    def ensure_directory(self, path: Path) -> None: ...

    def write_file(self, path: Path, content: str, overwrite: bool) -> None: ...

    def read_file(self, path: Path) -> str: ...

    def exists(self, path: Path) -> bool: ...

    def is_directory(self, path: Path) -> bool: ...

    def list_directory(self, path: Path) -> list[str]: ...


class FileSystemMaterializer:
    """:class:`Materializer` backed by the local file system.

    Every write goes to a temporary file in the destination directory which is
    then moved into place with :func:`os.replace`, so a file is either fully
    written or not touched at all.
    """

    def ensure_directory(self, path: Path) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MaterializeError(path, exc.strerror or str(exc)) from exc

    def write_file(self, path: Path, content: str, overwrite: bool) -> None:
        target = Path(path)
        if not overwrite and target.exists():
            raise AlreadyExistsError(target)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise MaterializeError(target, exc.strerror or str(exc)) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            os.replace(tmp_name, target)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise MaterializeError(target, exc.strerror or str(exc)) from exc

    def read_file(self, path: Path) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFoundError(path) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise MaterializeError(path, str(exc)) from exc

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_directory(self, path: Path) -> bool:
        return Path(path).is_dir()

    def list_directory(self, path: Path) -> list[str]:
        """Names of the entries directly under *path*, sorted."""
        try:
            return sorted(child.name for child in Path(path).iterdir())
        except FileNotFoundError as exc:
            raise NotFoundError(path) from exc
        except OSError as exc:
            raise MaterializeError(path, exc.strerror or str(exc)) from exc


# ---------------------------------------------------------------------------
# Plan materialization
# ---------------------------------------------------------------------------


class ExistingPolicy(str, enum.Enum):
    """What to do when a planned file is already present."""

    FAIL = "fail"
    OVERWRITE = "overwrite"
    SKIP = "skip"


class MaterializeResult(BaseModel):
    """Relative paths touched by one :func:`materialize_plan` call."""

    directories: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def written(self) -> list[str]:
        """Directories created and files written, in plan order."""
        return [*self.directories, *self.files]


async def materialize_plan(
    entries: Sequence[PlanEntry],
    root: Path,
    contents: Mapping[str, str],
    materializer: Materializer,
    *,
    existing: ExistingPolicy = ExistingPolicy.FAIL,
    max_workers: int = 8,
    cancel_event: Optional[threading.Event] = None,
) -> MaterializeResult:
    """Create the directories and write the files of a plan under *root*.

    Args:
        entries: Plan entries; directory entries are handled before any file.
        root: Output root the entry paths are relative to.
        contents: Rendered content per file path.
        materializer: File-system implementation.
        existing: Policy for files that already exist.
        max_workers: Maximum number of concurrent file writes.
        cancel_event: Set by the caller to stop remaining writes.  Files
            already written are kept.

    Returns:
        What was written, skipped, and whether the run was cancelled.

    Raises:
        AlreadyExistsError: Under :attr:`ExistingPolicy.FAIL` when a file exists.
        MaterializeError: On the first I/O failure.  Remaining writes are not
            started and nothing is rolled back.
    """
    root = Path(root)
    result = MaterializeResult()
    stop = threading.Event()

    def _cancelled() -> bool:
        return cancel_event is not None and cancel_event.is_set()

    # Directories: sequential, parents first.  Files also get their parent
    # directory ensured here so that no write races a mkdir.
    dir_entries = [e for e in entries if e.is_directory]
    file_entries = [e for e in entries if not e.is_directory]
    parents = {str(Path(e.path).parent) for e in file_entries} - {"."}
    wanted = [e.path for e in dir_entries] + sorted(
        parents - {e.path for e in dir_entries}, key=lambda d: (d.count("/"), d)
    )

    for rel in wanted:
        if _cancelled():
            result.cancelled = True
            return result
        target = root / rel
        if await asyncio.to_thread(materializer.exists, target):
            continue
        await asyncio.to_thread(materializer.ensure_directory, target)
        logger.debug("created directory %s", rel)
        if rel in {e.path for e in dir_entries}:
            result.directories.append(rel)

    semaphore = asyncio.Semaphore(max(1, max_workers))
    outcomes: dict[str, str] = {}

    async def _write(entry: PlanEntry) -> None:
        async with semaphore:
            if stop.is_set() or _cancelled():
                return
            target = root / entry.path
            if existing is ExistingPolicy.SKIP and await asyncio.to_thread(
                materializer.exists, target
            ):
                outcomes[entry.path] = "skipped"
                return
            try:
                await asyncio.to_thread(
                    materializer.write_file,
                    target,
                    contents[entry.path],
                    existing is ExistingPolicy.OVERWRITE,
                )
            except Exception:
                stop.set()
                raise
            outcomes[entry.path] = "written"
            logger.debug("wrote %s", entry.path)

    results = await asyncio.gather(
        *(_write(e) for e in file_entries), return_exceptions=True
    )

    for entry in file_entries:
        state = outcomes.get(entry.path)
        if state == "written":
            result.files.append(entry.path)
        elif state == "skipped":
            result.skipped.append(entry.path)

    errors = [r for r in results if isinstance(r, BaseException)]
    if errors:
        raise errors[0]

    if _cancelled() and len(outcomes) < len(file_entries):
        result.cancelled = True
        logger.warning(
            "materialization cancelled after %d of %d files",
            len(result.files),
            len(file_entries),
        )
    return result
