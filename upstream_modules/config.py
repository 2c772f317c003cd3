"""Resolver configuration: environment variables with explicit overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from upstream_modules.archive import MANIFEST_ENTRY

_ENV_BASE_DIR = "UPSTREAM_MODULES_BASE_DIR"
_ENV_MODULE_ROOT = "UPSTREAM_MODULES_MODULE_ROOT"
_ENV_OUTPUT_DIR = "UPSTREAM_MODULES_OUTPUT_DIR"


@dataclass(frozen=True)
class ResolverConfig:
    base_dir: Path
    module_root: Path
    output_dir: Path
    manifest_entry: str = MANIFEST_ENTRY

    @classmethod
    def from_env(
        cls,
        base_dir: Path | str | None = None,
        module_root: Path | str | None = None,
        output_dir: Path | str | None = None,
    ) -> ResolverConfig:
        """Build a config; non-None arguments win over the environment.

        ``module_root`` defaults to ``<base_dir>/node_modules`` and
        ``output_dir`` to ``<base_dir>/target/classes``.
        """
        base = Path(base_dir or os.environ.get(_ENV_BASE_DIR) or Path.cwd())
        modules = module_root or os.environ.get(_ENV_MODULE_ROOT)
        output = output_dir or os.environ.get(_ENV_OUTPUT_DIR)
        return cls(
            base_dir=base,
            module_root=Path(modules) if modules else base / "node_modules",
            output_dir=Path(output) if output else base / "target" / "classes",
        )
