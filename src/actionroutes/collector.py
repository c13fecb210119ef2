"""Collected controller actions and the collected-over-discovered merge.

Autoload discovery only sees controllers that live where a handle's
namespace says they should.  Controllers in the analysed source tree are
collected directly from their files, and that collected data takes
precedence whenever both sources know the same class.
"""

import json
import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from actionroutes.config import BASE_CONTROLLER
from actionroutes.discovery import action_methods, qualifies_as_controller
from actionroutes.errors import ConfigurationError
from actionroutes.php.reflection import SourceReflector

logger = logging.getLogger("actionroutes.collector")

_SKIPPED_DIRS = frozenset({"vendor", "node_modules", ".git"})


def iter_php_files(paths: Iterable[str | Path]) -> Iterable[Path]:
    """Yield ``.php`` files under each path (files are yielded as-is)."""
    for path in paths:
        root = Path(path)
        if root.is_file():
            if root.suffix == ".php":
                yield root
            continue
        if not root.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRS)
            for filename in sorted(filenames):
                if filename.endswith(".php"):
                    yield Path(dirpath) / filename


def collect_controller_actions(
    paths: Iterable[str | Path],
    reflector: SourceReflector,
    *,
    base_controller: str = BASE_CONTROLLER,
) -> dict[str, tuple[str, ...]]:
    """Collect every concrete controller declared under ``paths``.

    Each file is registered with ``reflector`` so parents and traits
    declared elsewhere in the tree resolve as well.
    """
    declared: list[str] = []
    for file in iter_php_files(paths):
        declared.extend(d.name for d in reflector.register_file(file) if d.kind == "class")

    collected: dict[str, tuple[str, ...]] = {}
    for fqcn in declared:
        reflection = reflector.reflect(fqcn)
        if reflection is None or not qualifies_as_controller(reflection, base_controller):
            continue
        actions = action_methods(reflection)
        if actions:
            collected[reflection.name] = tuple(actions)
    logger.debug("Collected %d controllers from %d declared classes", len(collected), len(declared))
    return collected


def merge_controller_actions(
    collected: Iterable[tuple[str, Sequence[str]]] | Mapping[str, Sequence[str]],
    discovered: Mapping[str, Sequence[str]],
) -> dict[str, tuple[str, ...]]:
    """Merge collected and discovered controller actions.

    Collected entries for the same class (for example from several files)
    are unioned in first-seen order.  Discovered entries are added only for
    classes the collected data does not mention.
    """
    pairs = collected.items() if isinstance(collected, Mapping) else collected

    merged: dict[str, list[str]] = {}
    for fqcn, methods in pairs:
        existing = merged.setdefault(fqcn, [])
        for method in methods:
            if method not in existing:
                existing.append(method)

    for fqcn, methods in discovered.items():
        if fqcn not in merged:
            merged[fqcn] = list(methods)

    return {fqcn: tuple(methods) for fqcn, methods in merged.items()}


def load_collected_file(path: str | Path) -> dict[str, tuple[str, ...]]:
    """Load externally collected actions from a JSON object file.

    The file maps controller FQCN to a list of action method names.

    Raises:
        ConfigurationError: If the file is unreadable or malformed.
    """
    file = Path(path)
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        msg = f"Cannot read collected actions from {file}: {exc}"
        raise ConfigurationError(msg) from exc

    if not isinstance(data, dict):
        msg = f"{file}: expected a JSON object of controller -> action methods"
        raise ConfigurationError(msg)

    result: dict[str, tuple[str, ...]] = {}
    for fqcn, methods in data.items():
        if not isinstance(methods, list) or not all(isinstance(m, str) for m in methods):
            msg = f"{file}: actions for {fqcn!r} must be a list of method names"
            raise ConfigurationError(msg)
        result[fqcn] = tuple(methods)
    return result
