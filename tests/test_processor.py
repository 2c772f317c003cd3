"""End-to-end tests for process_upstream_dependencies."""

from __future__ import annotations

from pathlib import Path

import pytest

from upstream_modules.config import ResolverConfig
from structlog.testing import capture_logs

from upstream_modules.exceptions import ArchiveOpenError, GraphAccessError, OutputDirectoryError
from upstream_modules.models import ArtifactId, DependencyNode
from upstream_modules.processor import process_upstream_dependencies

PAST = 1_600_000_000.0

# ── helpers ──


def _node(name: str, file: Path | None = None, *children: DependencyNode) -> DependencyNode:
    return DependencyNode(
        artifact=ArtifactId(group="io.example", name=name, version="1.0"),
        file=file,
        children=list(children),
    )


class StaticGraph:
    def __init__(self, root: DependencyNode) -> None:
        self.root = root

    def build_graph(self) -> DependencyNode:
        return self.root


class BrokenGraph:
    def build_graph(self) -> DependencyNode:
        raise GraphAccessError("resolver offline")


@pytest.fixture
def config(tmp_path):
    base = tmp_path / "project"
    base.mkdir()
    return ResolverConfig.from_env(base_dir=base)


# ── scenarios ──


class TestProcessUpstreamDependencies:
    def test_end_to_end(self, make_archive, config):
        p1 = make_archive(
            "p1",
            manifest={"name": "upstream-one"},
            files={"index.js": "index", "lib/a.js": "a"},
            mtime=PAST,
        )
        p2 = make_archive("p2", files={"index.js": "not a module"}, mtime=PAST)
        graph = StaticGraph(_node("app", None, _node("p1", p1), _node("p2", p2)))

        result = process_upstream_dependencies(graph, config)

        out = config.module_root / "upstream-one"
        assert (out / "index.js").read_text() == "index"
        assert (out / "lib" / "a.js").read_text() == "a"
        assert sorted(p.name for p in config.module_root.iterdir()) == ["upstream-one"]
        assert [d.name for d in result.artifacts] == ["upstream-one"]
        # index.js, lib/a.js and the manifest itself
        assert result.files_written == 3
        assert result.elapsed >= 0

    def test_end_to_end_counts_only_written_files(self, make_archive, config):
        p1 = make_archive(
            "p1", files={"index.js": "index", "lib/a.js": "a"}, manifest={"name": "upstream-one"}, mtime=PAST
        )
        out = config.module_root / "upstream-one"
        out.mkdir(parents=True)
        (out / "package.json").write_text("{}")  # newer than the artifact

        result = process_upstream_dependencies(StaticGraph(_node("app", None, _node("p1", p1))), config)

        assert result.files_written == 2
        assert result.files_skipped == 1

    def test_idempotent(self, make_archive, config):
        p1 = make_archive("p1", manifest={"name": "upstream-one"}, files={"index.js": "i"}, mtime=PAST)
        graph = StaticGraph(_node("app", None, _node("p1", p1)))

        process_upstream_dependencies(graph, config)
        second = process_upstream_dependencies(graph, config)

        assert second.files_written == 0
        assert second.files_skipped == 2

    def test_scoped_and_plain_modules(self, make_archive, config):
        up1 = make_archive("upstream-1", manifest={"name": "@jenkins-cd/upstream-1"}, files={"a.js": "1"})
        up2 = make_archive("upstream-2", manifest={"name": "upstream-2"}, files={"b.js": "2"})
        graph = StaticGraph(_node("downstream", None, _node("upstream-1", up1, _node("upstream-2", up2))))

        result = process_upstream_dependencies(graph, config)

        assert sorted(p.name for p in config.module_root.iterdir()) == ["@jenkins-cd", "upstream-2"]
        assert (config.module_root / "@jenkins-cd" / "upstream-1" / "a.js").read_text() == "1"
        assert [r.name for r in result.installed] == ["@jenkins-cd/upstream-1", "upstream-2"]

    def test_no_dependencies_leaves_empty_module_root(self, config):
        result = process_upstream_dependencies(StaticGraph(_node("app")), config)

        assert config.module_root.is_dir()
        assert list(config.module_root.iterdir()) == []
        assert result.files_written == 0

    def test_graph_failure_writes_nothing(self, config):
        with pytest.raises(GraphAccessError):
            process_upstream_dependencies(BrokenGraph(), config)
        assert not config.module_root.exists()

    def test_module_root_failure(self, make_archive, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        config = ResolverConfig.from_env(base_dir=tmp_path, module_root=blocker / "node_modules")
        graph = StaticGraph(_node("app", None, _node("p1", make_archive("p1", manifest={"name": "p1"}))))

        with pytest.raises(OutputDirectoryError):
            process_upstream_dependencies(graph, config)

    def test_corrupt_payload_aborts_with_typed_error(self, make_archive, corrupt_entry, config):
        p1 = make_archive("p1", manifest={"name": "p1"}, files={"index.js": "exports.x = 1;\n" * 20})
        corrupt_entry(p1, "index.js")
        graph = StaticGraph(_node("app", None, _node("p1", p1)))

        with pytest.raises(ArchiveOpenError, match="index.js"):
            process_upstream_dependencies(graph, config)

    def test_summary_event_reports_phases(self, make_archive, config):
        p1 = make_archive("p1", manifest={"name": "p1"}, files={"index.js": "i"}, mtime=PAST)
        graph = StaticGraph(_node("app", None, _node("p1", p1)))

        with capture_logs() as logs:
            process_upstream_dependencies(graph, config)

        (done,) = [e for e in logs if e["event"] == "processor.done"]
        assert done["files_written"] == 2
        assert [p["phase"] for p in done["phases"]] == ["resolve", "materialize"]
        assert all(p["status"] == "completed" for p in done["phases"])
