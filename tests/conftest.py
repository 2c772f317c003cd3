"""Shared pytest fixtures for upstream module resolver tests."""

import json
import os
import zipfile
from pathlib import Path

import pytest


@pytest.fixture
def make_archive(tmp_path):
    """Build a zip artifact under tmp_path/repo and return its path.

    ``manifest`` may be a dict (serialized as package.json), raw bytes, or None.
    """

    def _make(
        artifact_name: str,
        files: dict[str, bytes | str] | None = None,
        manifest: dict | bytes | None = None,
        dirs: tuple[str, ...] = (),
        mtime: float | None = None,
    ) -> Path:
        repo = tmp_path / "repo"
        repo.mkdir(exist_ok=True)
        path = repo / f"{artifact_name}.jar"
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as z:
            for d in dirs:
                z.writestr(d.rstrip("/") + "/", b"")
            if manifest is not None:
                data = manifest if isinstance(manifest, bytes) else json.dumps(manifest).encode()
                z.writestr("package.json", data)
            for name, content in (files or {}).items():
                z.writestr(name, content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def corrupt_entry():
    """Overwrite the compressed bytes of one member with 0xFF, keeping the archive's mtime."""

    def _corrupt(path: Path, entry_name: str) -> None:
        stat = path.stat()
        with zipfile.ZipFile(path) as z:
            info = z.getinfo(entry_name)
        with open(path, "r+b") as f:
            f.seek(info.header_offset + 26)
            name_len = int.from_bytes(f.read(2), "little")
            extra_len = int.from_bytes(f.read(2), "little")
            f.seek(info.header_offset + 30 + name_len + extra_len)
            f.write(b"\xff" * info.compress_size)
        os.utime(path, (stat.st_atime, stat.st_mtime))

    return _corrupt
