"""Copy the project's own manifest into the build output directory."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import structlog

from upstream_modules.archive import MANIFEST_ENTRY
from upstream_modules.exceptions import EntryWriteError

log = structlog.get_logger(__name__)


def copy_project_manifest(base_dir: Path, output_dir: Path) -> Path | None:
    """Copy ``<base_dir>/package.json`` to *output_dir* when it is newer.

    Returns the destination when a copy happened, ``None`` when the project has
    no readable manifest or the existing copy is up to date.
    """
    source = Path(base_dir) / MANIFEST_ENTRY
    if not source.is_file() or not os.access(source, os.R_OK):
        return None

    dest = Path(output_dir) / MANIFEST_ENTRY
    try:
        if dest.exists() and source.stat().st_mtime <= dest.stat().st_mtime:
            return None
        log.info("resources.copy", source=str(source), dest=str(dest))
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
    except OSError as exc:
        raise EntryWriteError(f"cannot copy {source} to {dest}: {exc}") from exc
    return dest
