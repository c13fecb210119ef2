"""Module handle → controller namespace resolution.

Craft routes ``handle/controller/action`` to the controllers namespace of
the module or plugin registered under ``handle``.  The map is assembled
from four sources, later sources winning for the same handle:

1. the core framework (``""`` → ``craft\\controllers``),
2. ``modules`` in ``config/app.php`` (multi-environment ``'*'`` section
   first, then the top level),
3. installed plugins from ``vendor/craftcms/plugins.php``,
4. manual overrides supplied by the caller.

Missing or unreadable files contribute nothing.  The result is an
immutable :class:`NamespaceMap`.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from actionroutes.config import CORE_HANDLE, CORE_NAMESPACE
from actionroutes.errors import PhpSyntaxError
from actionroutes.naming import NAMESPACE_SEPARATOR
from actionroutes.php.reflection import ClassReflector
from actionroutes.php.values import read_php_return

logger = logging.getLogger("actionroutes.namespaces")

PLUGIN_REGISTRY = Path("vendor") / "craftcms" / "plugins.php"
CONTROLLERS_SEGMENT = "controllers"
SHARED_ENVIRONMENT = "*"


@dataclass(frozen=True, slots=True)
class NamespaceMap:
    """Read-only handle → controller namespace snapshot.

    Attributes:
        handles: Mapping of module handle to controller namespace.  The
            empty handle is the core framework.
        project_root: Directory two levels above the config file, or
            ``None`` when no config file was found.
    """

    handles: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    project_root: Path | None = None

    def items(self) -> Iterable[tuple[str, str]]:
        return self.handles.items()

    def __getitem__(self, handle: str) -> str:
        return self.handles[handle]

    def __contains__(self, handle: object) -> bool:
        return handle in self.handles

    def __len__(self) -> int:
        return len(self.handles)


def controller_namespace_for(module_class: str) -> str:
    """Derive a module's controller namespace from its class name.

    ``modules\\blog\\Blog`` → ``modules\\blog\\controllers``.  A class
    with no namespace gets ``Blog\\controllers``.
    """
    module_class = module_class.strip(NAMESPACE_SEPARATOR)
    namespace, sep, _ = module_class.rpartition(NAMESPACE_SEPARATOR)
    if not sep:
        namespace = module_class
    return f"{namespace}{NAMESPACE_SEPARATOR}{CONTROLLERS_SEGMENT}"


def resolve_namespaces(
    config_path: str | Path,
    overrides: Mapping[str, str] | None = None,
    *,
    reflector: ClassReflector | None = None,
    core_namespace: str = CORE_NAMESPACE,
) -> NamespaceMap:
    """Build the handle → namespace map for a project.

    Args:
        config_path: Path to ``config/app.php`` (or a ``.json`` equivalent).
        overrides: Manual handle → namespace entries, applied last.
        reflector: Used to decide whether a bare module class name is
            loadable.  Without one, only namespaced names are accepted.
        core_namespace: Controller namespace of the core framework.

    Returns:
        The immutable map together with the located project root.
    """
    handles: dict[str, str] = {CORE_HANDLE: core_namespace}
    project_root: Path | None = None

    config_file = Path(config_path)
    if config_file.is_file():
        project_root = config_file.absolute().parent.parent

        config = _load_config(config_file)
        for handle, definition in _module_definitions(config).items():
            module_class = _module_class(definition, reflector)
            if module_class is None:
                logger.debug("Skipping module %r: unresolvable definition", handle)
                continue
            handles[str(handle)] = controller_namespace_for(module_class)

        for handle, plugin_class in _plugins(project_root / PLUGIN_REGISTRY):
            handles[handle] = controller_namespace_for(plugin_class)
    else:
        logger.debug("Config file %s not found; core handle only", config_file)

    for handle, namespace in (overrides or {}).items():
        handles[handle] = namespace

    return NamespaceMap(handles=MappingProxyType(handles), project_root=project_root)


def _load_config(path: Path) -> Any:
    """Read a PHP or JSON config file; failures read as an empty config."""
    try:
        if path.suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        return read_php_return(path)
    except (OSError, ValueError, PhpSyntaxError) as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return None


def _module_definitions(config: Any) -> dict[Any, Any]:
    """Return ``config['*']['modules'] ?? config['modules'] ?? []``."""
    if not isinstance(config, dict):
        return {}
    shared = config.get(SHARED_ENVIRONMENT)
    if isinstance(shared, dict) and shared.get("modules") is not None:
        modules = shared["modules"]
    else:
        modules = config.get("modules")
    if isinstance(modules, dict):
        return modules
    if isinstance(modules, list):
        return dict(enumerate(modules))
    return {}


def _module_class(definition: Any, reflector: ClassReflector | None) -> str | None:
    """Resolve a module definition to its class name.

    Accepts a class-name string (namespaced, or bare but loadable) or a
    mapping with a string ``class`` entry.
    """
    if isinstance(definition, str) and definition:
        if NAMESPACE_SEPARATOR in definition:
            return definition
        if reflector is not None and reflector.reflect(definition) is not None:
            return definition
        return None
    if isinstance(definition, dict):
        module_class = definition.get("class")
        if isinstance(module_class, str):
            return module_class
    return None


def _plugins(registry: Path) -> list[tuple[str, str]]:
    """Read ``(handle, class)`` pairs from Craft's generated plugin registry."""
    if not registry.is_file():
        return []
    try:
        plugins = read_php_return(registry)
    except (OSError, PhpSyntaxError) as exc:
        logger.debug("Cannot read plugin registry %s: %s", registry, exc)
        return []

    if isinstance(plugins, dict):
        descriptors = list(plugins.values())
    elif isinstance(plugins, list):
        descriptors = plugins
    else:
        return []

    found: list[tuple[str, str]] = []
    for descriptor in descriptors:
        if not isinstance(descriptor, dict):
            continue
        handle = descriptor.get("handle")
        plugin_class = descriptor.get("class")
        if isinstance(handle, str) and isinstance(plugin_class, str):
            found.append((handle, plugin_class))
    return found
