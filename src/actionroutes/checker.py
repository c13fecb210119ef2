"""Action route checking — validate ``actionInput()`` references in templates.

Builds the project snapshot once, derives the route index from it and
scans the template roots::

    config = CheckConfig(template_paths=("templates",))
    result = run_check(config)
    for diagnostic in result.diagnostics:
        print(f"{diagnostic.file}:{diagnostic.line} {diagnostic.message}")

    # Or via CLI:
    #   actionroutes check

"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from actionroutes.collector import collect_controller_actions, merge_controller_actions
from actionroutes.config import CheckConfig
from actionroutes.discovery import discover_controllers, load_autoload_map
from actionroutes.namespaces import NamespaceMap, resolve_namespaces
from actionroutes.php.reflection import SourceReflector
from actionroutes.routes import RouteIndex, build_routes, handles_for
from actionroutes.templates import (
    Diagnostic,
    check_references,
    iter_template_files,
    read_references,
    sort_diagnostics,
)

logger = logging.getLogger("actionroutes.checker")


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProjectSnapshot:
    """Everything read from the project, built once per run.

    Attributes:
        namespaces: Handle → controller namespace map and project root.
        autoload: PSR-4 prefix → base directories in effect.
        discovered: Controllers found through the autoload table.
        reflector: The class lookup the snapshot was built with, reused
            for default-action resolution.
    """

    namespaces: NamespaceMap
    autoload: Mapping[str, tuple[str, ...]]
    discovered: Mapping[str, tuple[str, ...]]
    reflector: SourceReflector

    @classmethod
    def build(cls, config: CheckConfig) -> "ProjectSnapshot":
        # the autoload table lives under the project root, which is only
        # known once the config file has been located
        root = _project_root(config.config_path)
        if config.autoload is not None:
            autoload = MappingProxyType({
                prefix: tuple(dirs) for prefix, dirs in config.autoload.items()
            })
        else:
            autoload = load_autoload_map(root)

        reflector = SourceReflector(autoload)
        namespaces = resolve_namespaces(
            config.config_path,
            config.handle_overrides,
            reflector=reflector,
            core_namespace=config.core_namespace,
        )
        discovered = discover_controllers(
            namespaces.handles.values(),
            autoload,
            reflector,
            base_controller=config.base_controller,
        )
        logger.debug(
            "Snapshot: %d handles, %d autoload prefixes, %d discovered controllers",
            len(namespaces), len(autoload), len(discovered),
        )
        return cls(
            namespaces=namespaces,
            autoload=autoload,
            discovered=MappingProxyType(discovered),
            reflector=reflector,
        )


def _project_root(config_path: str | Path) -> Path | None:
    path = Path(config_path)
    if path.is_file():
        return path.absolute().parent.parent
    return None


def controller_actions(snapshot: ProjectSnapshot, config: CheckConfig) -> dict[str, tuple[str, ...]]:
    """Merge collected controller data over the snapshot's discovered data."""
    collected: dict[str, tuple[str, ...]] = {}
    if config.scan_paths:
        collected.update(collect_controller_actions(
            config.scan_paths,
            snapshot.reflector,
            base_controller=config.base_controller,
        ))
    pairs: list[tuple[str, tuple[str, ...]]] = list(collected.items())
    if config.collected:
        pairs.extend((fqcn, tuple(methods)) for fqcn, methods in config.collected.items())
    return merge_controller_actions(pairs, snapshot.discovered)


def build_index(config: CheckConfig) -> tuple[ProjectSnapshot, dict[str, tuple[str, ...]], RouteIndex]:
    """Build the snapshot, the merged controller map and the route index."""
    snapshot = ProjectSnapshot.build(config)
    actions = controller_actions(snapshot, config)
    index = build_routes(snapshot.namespaces.handles, actions, reflector=snapshot.reflector)
    return snapshot, actions, index


# ---------------------------------------------------------------------------
# Checker
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class CheckResult:
    """Result of an action route check."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    handles: int = 0
    controllers: int = 0
    routes: int = 0
    templates_scanned: int = 0
    references_found: int = 0

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            f"Indexed {self.routes} routes from {self.controllers} controllers "
            f"across {self.handles} handles, "
            f"scanned {self.templates_scanned} templates, "
            f"found {self.references_found} action references.",
        ]
        if self.ok:
            lines.append("No issues found.")
        else:
            lines.append(f"{len(self.diagnostics)} error(s).")
        for diagnostic in self.diagnostics:
            lines.append(f"  [ERROR] {diagnostic.message} in {diagnostic.file}:{diagnostic.line}")
            if diagnostic.tip:
                lines.append(f"          {diagnostic.tip}")
        return "\n".join(lines)


def run_check(config: CheckConfig | None = None) -> CheckResult:
    """Validate every ``actionInput()`` reference in the configured templates.

    Args:
        config: Check inputs; defaults to a standard project layout in the
            working directory.

    Returns:
        CheckResult with diagnostics and statistics.
    """
    config = config or CheckConfig()
    snapshot, actions, index = build_index(config)

    handle_items = list(snapshot.namespaces.items())
    result = CheckResult(
        handles=len(snapshot.namespaces),
        # controllers outside every handle namespace contribute no routes
        controllers=sum(1 for fqcn in actions if handles_for(fqcn, handle_items)),
        routes=len(index),
    )

    diagnostics: list[Diagnostic] = []
    for path in iter_template_files(config.template_paths, config.template_extension):
        references = read_references(path)
        if references is None:
            continue
        result.templates_scanned += 1
        result.references_found += len(references)
        diagnostics.extend(check_references(references, index))

    result.diagnostics = sort_diagnostics(diagnostics)
    return result
