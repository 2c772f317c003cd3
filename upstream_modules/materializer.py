"""Incremental materializer: copy a module's archive into the module root."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from upstream_modules.archive import ENTRY_READ_ERRORS, ArchiveOpener, open_zip_archive
from upstream_modules.exceptions import ArchiveOpenError, EntryWriteError, OutputDirectoryError
from upstream_modules.models import ManifestDescriptor, MaterializeResult

log = structlog.get_logger(__name__)


def target_directory(module_root: Path, name: str) -> Path:
    """``@scope/pkg`` -> ``<module_root>/@scope/pkg``."""
    out = Path(module_root)
    for segment in name.split("/"):
        out = out / segment
    return out


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputDirectoryError(f"cannot create directory {path}: {exc}") from exc


def _destination(target_dir: Path, entry_name: str) -> Path:
    dest = target_dir.joinpath(*entry_name.split("/"))
    resolved_root = target_dir.resolve()
    if resolved_root not in dest.resolve().parents:
        raise EntryWriteError(f"entry {entry_name!r} escapes {target_dir}")
    return dest


def materialize(
    descriptor: ManifestDescriptor,
    module_root: Path,
    opener: ArchiveOpener = open_zip_archive,
) -> MaterializeResult:
    """Copy every file entry of the descriptor's archive under its target directory.

    An entry is skipped when its destination already exists with an mtime at
    least as new as the archive's. Nothing is rolled back on failure.
    """
    target_dir = target_directory(module_root, descriptor.name)
    _ensure_dir(target_dir)

    if descriptor.node.file is None:
        raise ArchiveOpenError(None, f"{descriptor.node.artifact} has no packaged file")
    archive_path = Path(descriptor.node.file)
    try:
        artifact_mtime = archive_path.stat().st_mtime
    except OSError as exc:
        raise ArchiveOpenError(archive_path, str(exc)) from exc

    result = MaterializeResult(name=descriptor.name, target_dir=target_dir)
    reader = opener(archive_path)
    try:
        for entry in reader.iter_entries():
            dest = _destination(target_dir, entry.name)
            try:
                fresh = dest.stat().st_mtime >= artifact_mtime
            except FileNotFoundError:
                fresh = False
            except OSError as exc:
                raise EntryWriteError(f"cannot check {dest}: {exc}") from exc
            if fresh:
                result.skipped += 1
                continue

            log.debug("materializer.copy", module=descriptor.name, path=str(dest))
            _ensure_dir(dest.parent)
            try:
                with reader.open_entry(entry) as src, open(dest, "wb") as out:
                    shutil.copyfileobj(src, out)
            except ENTRY_READ_ERRORS as exc:
                raise ArchiveOpenError(archive_path, f"cannot read {entry.name}: {exc}") from exc
            except OSError as exc:
                raise EntryWriteError(f"cannot write {dest}: {exc}") from exc
            result.written += 1
    finally:
        reader.close()

    log.debug(
        "materializer.done",
        module=descriptor.name,
        written=result.written,
        skipped=result.skipped,
    )
    return result
