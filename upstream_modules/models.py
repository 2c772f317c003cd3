"""Data models for the upstream module resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ArtifactId:
    """Coordinates of a resolved dependency."""

    group: str
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"


@dataclass
class DependencyNode:
    """A node of the project's dependency tree, as handed over by the graph provider."""

    artifact: ArtifactId
    file: Path | None = None  # packaged file on disk
    children: list[DependencyNode] = field(default_factory=list)

    def file_identity(self) -> str | None:
        """Canonical archive path used to detect repeat visits."""
        if self.file is None:
            return None
        return str(Path(self.file).resolve())


@dataclass(frozen=True)
class ManifestDescriptor:
    """Parsed manifest of a qualifying artifact."""

    node: DependencyNode
    name: str  # declared module name, e.g. "@scope/pkg"
    manifest: dict[str, Any] = field(hash=False, compare=False)

    @property
    def name_segments(self) -> list[str]:
        return self.name.split("/")


class InspectionStatus(Enum):
    """Outcome of inspecting a single dependency node."""

    QUALIFIES = "qualifies"
    ABSENT = "absent"  # archive readable, no manifest
    UNREADABLE = "unreadable"  # archive or manifest could not be read


@dataclass(frozen=True)
class Inspection:
    status: InspectionStatus
    descriptor: ManifestDescriptor | None = None
    error: str | None = None

    @property
    def qualifies(self) -> bool:
        return self.status is InspectionStatus.QUALIFIES


@dataclass
class MaterializeResult:
    """Files written and skipped for one artifact."""

    name: str
    target_dir: Path
    written: int = 0
    skipped: int = 0


@dataclass
class ProcessResult:
    """Result of a full resolve + materialize run."""

    artifacts: list[ManifestDescriptor]
    files_written: int
    files_skipped: int
    elapsed: float
    installed: list[MaterializeResult] = field(default_factory=list)
