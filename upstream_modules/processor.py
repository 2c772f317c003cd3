"""Resolve upstream modules and install them under the module root."""

from __future__ import annotations

import structlog

from upstream_modules.archive import ArchiveOpener, open_zip_archive
from upstream_modules.config import ResolverConfig
from upstream_modules.exceptions import OutputDirectoryError, UpstreamModulesError
from upstream_modules.graph import GraphProvider
from upstream_modules.materializer import materialize
from upstream_modules.models import ProcessResult
from upstream_modules.progress import ProgressTracker
from upstream_modules.walker import GraphWalker

log = structlog.get_logger(__name__)


def process_upstream_dependencies(
    provider: GraphProvider,
    config: ResolverConfig,
    *,
    opener: ArchiveOpener = open_zip_archive,
) -> ProcessResult:
    """Full pipeline: build graph -> walk -> create module root -> materialize.

    Graph, directory and write failures propagate; the caller sees either a
    complete run or an exception.
    """
    tracker = ProgressTracker()

    tracker.start_phase("resolve")
    try:
        root = provider.build_graph()
        walker = GraphWalker(opener=opener, manifest_entry=config.manifest_entry)
        artifacts = walker.resolve_qualifying_artifacts(root)
    except UpstreamModulesError as exc:
        tracker.fail_phase("resolve", str(exc))
        raise
    tracker.complete_phase("resolve", detail=f"{len(artifacts)} module(s)")

    tracker.start_phase("materialize")
    installed = []
    try:
        try:
            config.module_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(
                f"cannot create module root {config.module_root}: {exc}"
            ) from exc

        for descriptor in artifacts:
            log.debug("processor.install", artifact=str(descriptor.node.artifact))
            installed.append(materialize(descriptor, config.module_root, opener=opener))
    except UpstreamModulesError as exc:
        tracker.fail_phase("materialize", str(exc))
        raise

    written = sum(r.written for r in installed)
    skipped = sum(r.skipped for r in installed)
    tracker.complete_phase("materialize", detail=f"{written} written, {skipped} skipped")

    summary = tracker.get_summary()
    result = ProcessResult(
        artifacts=artifacts,
        files_written=written,
        files_skipped=skipped,
        elapsed=summary["elapsed"],
        installed=installed,
    )
    log.info(
        "processor.done",
        project=str(root.artifact),
        artifacts=len(artifacts),
        files_written=written,
        files_skipped=skipped,
        elapsed=result.elapsed,
        phases=summary["phases"],
    )
    return result
