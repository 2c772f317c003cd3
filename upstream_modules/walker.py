"""Graph walker: collect the upstream modules reachable from the project."""

from __future__ import annotations

import structlog

from upstream_modules.archive import MANIFEST_ENTRY, ArchiveOpener, open_zip_archive, parse_manifest
from upstream_modules.exceptions import ArchiveOpenError, ManifestDecodeError
from upstream_modules.models import (
    ArtifactId,
    DependencyNode,
    Inspection,
    InspectionStatus,
    ManifestDescriptor,
)

log = structlog.get_logger(__name__)


class GraphWalker:
    """Depth-first, pre-order traversal that stops at the first non-module.

    Qualifying modules are assumed to form a contiguous subgraph rooted at the
    project: children of an artifact without a manifest are never inspected.
    """

    def __init__(
        self,
        opener: ArchiveOpener = open_zip_archive,
        manifest_entry: str = MANIFEST_ENTRY,
    ) -> None:
        self._opener = opener
        self._manifest_entry = manifest_entry

    def resolve_qualifying_artifacts(
        self,
        root: DependencyNode,
        project: ArtifactId | None = None,
    ) -> list[ManifestDescriptor]:
        """Return the qualifying descriptors in discovery order.

        *project* identifies the node being built; it defaults to the root's
        artifact. That node is never inspected but its children always are.
        """
        results: list[ManifestDescriptor] = []
        visited: set[str] = set()
        self._collect(root, project or root.artifact, results, visited)
        return results

    def _collect(
        self,
        node: DependencyNode,
        project: ArtifactId,
        results: list[ManifestDescriptor],
        visited: set[str],
    ) -> None:
        # The project node is tracked too, so a cycle back to it terminates.
        identity = node.file_identity() or f"artifact:{node.artifact}"
        if identity in visited:
            return
        visited.add(identity)

        if node.artifact != project:
            log.debug("walker.inspect", artifact=str(node.artifact), file=str(node.file))
            inspection = self.inspect_node(node)
            descriptor = inspection.descriptor
            if descriptor is None:
                if inspection.status is InspectionStatus.UNREADABLE:
                    log.warning(
                        "walker.unreadable", artifact=str(node.artifact), error=inspection.error
                    )
                else:
                    log.debug("walker.pruned", artifact=str(node.artifact))
                return

            log.info("walker.qualified", artifact=str(node.artifact), module=descriptor.name)
            results.append(descriptor)

        for child in node.children:
            self._collect(child, project, results, visited)

    def inspect_node(self, node: DependencyNode) -> Inspection:
        """Decide whether *node* is an upstream module without raising."""
        if node.file is None:
            return Inspection(InspectionStatus.UNREADABLE, error="artifact has no packaged file")
        try:
            reader = self._opener(node.file)
            try:
                data = reader.find_entry(self._manifest_entry)
            finally:
                reader.close()
        except ArchiveOpenError as exc:
            return Inspection(InspectionStatus.UNREADABLE, error=str(exc))

        if data is None:
            return Inspection(InspectionStatus.ABSENT)

        try:
            name, manifest = parse_manifest(data)
        except ManifestDecodeError as exc:
            return Inspection(InspectionStatus.UNREADABLE, error=str(exc))

        return Inspection(
            InspectionStatus.QUALIFIES,
            descriptor=ManifestDescriptor(node=node, name=name, manifest=manifest),
        )
