"""Spec file discovery."""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

from grove.context import world_scope
from grove.group import ExampleGroup
from grove.world import World


logger = logging.getLogger(__name__)

SPEC_FILE_PATTERNS = ("spec_*.py", "*_spec.py")


def is_spec_file(path: Path) -> bool:
    return path.suffix == ".py" and (path.name.startswith("spec_") or path.stem.endswith("_spec"))


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode()).hexdigest()[:10]
    return f"grove_spec_{path.stem}_{digest}"


def _load_module(path: Path) -> ModuleType:
    name = _module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load spec file: {path}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def spec_files(path: Path) -> list[Path]:
    """Spec files at ``path``, sorted so declaration order is stable."""
    if path.is_file():
        return [path] if is_spec_file(path) else []
    found: set[Path] = set()
    for pattern in SPEC_FILE_PATTERNS:
        found.update(path.rglob(pattern))
    return sorted(found)


def collect(path: Path | str | None, world: World) -> list[ExampleGroup]:
    """Import spec files under ``path`` and return the root groups they declared.

    Module-level :func:`grove.describe` calls register into ``world``.

    Args:
        path: File or directory to search. Defaults to the current directory.
        world: The world receiving the declared groups.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    if path is None:
        path = Path.cwd()
    elif isinstance(path, str):
        path = Path(path)

    path = path.resolve()
    if not path.exists():
        msg = f"No such file or directory: {path}"
        raise FileNotFoundError(msg)

    before = len(world.example_groups)
    with world_scope(world):
        for file_path in spec_files(path):
            logger.debug("Loading spec file %s", file_path)
            _load_module(file_path)
    return world.example_groups[before:]


__all__ = ["SPEC_FILE_PATTERNS", "collect", "is_spec_file", "spec_files"]
