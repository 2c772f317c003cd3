"""Archive inspection: exact-name entry lookup and streaming over zip archives."""

from __future__ import annotations

import json
import zipfile
import zlib
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Protocol, runtime_checkable

from upstream_modules.exceptions import ArchiveOpenError, ManifestDecodeError

MANIFEST_ENTRY = "package.json"

# Raised by zipfile while decompressing a member (corrupt stream, CRC mismatch,
# truncation, unsupported compression or encryption).
ENTRY_READ_ERRORS: tuple[type[BaseException], ...] = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


@dataclass(frozen=True)
class ArchiveEntry:
    """A non-directory entry of an archive."""

    name: str  # internal path, "/"-separated
    size: int
    index: int = field(default=-1, compare=False)  # position in the backend's listing


@runtime_checkable
class ArchiveReader(Protocol):
    """Interface every archive backend must satisfy."""

    def find_entry(self, entry_name: str) -> bytes | None: ...

    def iter_entries(self) -> Iterator[ArchiveEntry]: ...

    def open_entry(self, entry: ArchiveEntry) -> IO[bytes]: ...

    def close(self) -> None: ...


ArchiveOpener = Callable[[Path], ArchiveReader]


class ZipArchiveReader:
    """Read-only view over a zip-structured artifact (jar, hpi, zip)."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveOpenError(self.path, str(exc)) from exc

    def __enter__(self) -> ZipArchiveReader:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def find_entry(self, entry_name: str) -> bytes | None:
        try:
            info = self._zip.getinfo(entry_name)
        except KeyError:
            return None
        if info.is_dir():
            return None
        try:
            return self._zip.read(info)
        except (OSError, *ENTRY_READ_ERRORS) as exc:
            raise ArchiveOpenError(self.path, f"cannot read {entry_name}: {exc}") from exc

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        for index, info in enumerate(self._zip.infolist()):
            if info.is_dir():
                continue
            yield ArchiveEntry(name=info.filename, size=info.file_size, index=index)

    def open_entry(self, entry: ArchiveEntry) -> IO[bytes]:
        try:
            member = self._zip.infolist()[entry.index] if entry.index >= 0 else entry.name
            return self._zip.open(member)
        except (OSError, *ENTRY_READ_ERRORS) as exc:
            raise ArchiveOpenError(self.path, f"cannot read {entry.name}: {exc}") from exc

    def close(self) -> None:
        self._zip.close()


def open_zip_archive(path: Path) -> ArchiveReader:
    """Default :data:`ArchiveOpener`."""
    return ZipArchiveReader(path)


def find_entry(
    archive_path: Path | str,
    entry_name: str,
    opener: ArchiveOpener = open_zip_archive,
) -> bytes | None:
    """Return the raw bytes of *entry_name* inside *archive_path*, or None if absent.

    Raises :class:`ArchiveOpenError` when the archive itself cannot be opened.
    Directory entries never match.
    """
    reader = opener(Path(archive_path))
    try:
        return reader.find_entry(entry_name)
    finally:
        reader.close()


def parse_manifest(data: bytes) -> tuple[str, dict[str, Any]]:
    """Decode a ``package.json`` blob and return ``(name, manifest)``.

    Only the ``name`` field is interpreted. It must be a non-empty string whose
    ``/``-separated segments are all usable directory names.
    """
    try:
        manifest = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestDecodeError(f"manifest is not valid UTF-8 JSON: {exc}") from exc
    if not isinstance(manifest, dict):
        raise ManifestDecodeError("manifest is not a JSON object")

    name = manifest.get("name")
    if not isinstance(name, str) or not name:
        raise ManifestDecodeError("manifest has no string 'name' field")
    for segment in name.split("/"):
        if segment in ("", ".", ".."):
            raise ManifestDecodeError(f"manifest name {name!r} is not a valid module path")
    return name, manifest
