"""Dependency graph providers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from upstream_modules.exceptions import GraphAccessError
from upstream_modules.models import ArtifactId, DependencyNode


@runtime_checkable
class GraphProvider(Protocol):
    """Anything that can hand over the project's dependency tree."""

    def build_graph(self) -> DependencyNode: ...


class JsonGraphProvider:
    """Load the dependency tree from a JSON document.

    Each node is an object with ``group``, ``name``, ``version``, an optional
    ``file`` (relative paths resolve against the document's directory) and an
    optional ``children`` list. The top-level object is the project.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def build_graph(self) -> DependencyNode:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GraphAccessError(f"cannot read dependency graph {self.path}: {exc}") from exc
        return self._node(data, "$")

    def _node(self, data: Any, where: str) -> DependencyNode:
        if not isinstance(data, dict):
            raise GraphAccessError(f"{where}: expected an object")
        try:
            artifact = ArtifactId(
                group=str(data["group"]),
                name=str(data["name"]),
                version=str(data["version"]),
            )
        except KeyError as exc:
            raise GraphAccessError(f"{where}: missing field {exc.args[0]!r}") from exc

        file = data.get("file")
        if file is not None and not isinstance(file, str):
            raise GraphAccessError(f"{where}.file: expected a string")
        children = data.get("children") or []
        if not isinstance(children, list):
            raise GraphAccessError(f"{where}.children: expected a list")

        return DependencyNode(
            artifact=artifact,
            file=self.path.parent / file if file else None,
            children=[self._node(c, f"{where}.children[{i}]") for i, c in enumerate(children)],
        )
