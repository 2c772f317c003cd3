"""Custom exceptions for the upstream module resolver."""

from __future__ import annotations

from pathlib import Path


class UpstreamModulesError(Exception):
    """Base exception for all resolver errors."""


class GraphAccessError(UpstreamModulesError):
    """Raised when the dependency graph cannot be obtained."""


class ArchiveOpenError(UpstreamModulesError):
    """Raised when an artifact's packaged file cannot be opened as an archive."""

    def __init__(self, path: Path | str | None, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open archive '{path}': {reason}")


class ManifestDecodeError(UpstreamModulesError):
    """Raised when a manifest exists but is unparseable or lacks a usable name."""


class OutputDirectoryError(UpstreamModulesError):
    """Raised when a destination directory cannot be created."""


class EntryWriteError(UpstreamModulesError):
    """Raised when a destination file cannot be written."""
