"""Filesystem controller discovery through the PSR-4 autoload table.

For every controller namespace in the handle map, finds the directories
Composer would load that namespace from, lists ``*Controller.php`` files
there and reflects each class::

    namespace   modules\\blog\\controllers
    prefix      modules\\                 -> [<root>/modules]
    directory   <root>/modules/blog/controllers
    candidates  PostsController.php  -> modules\\blog\\controllers\\PostsController

A candidate survives when it is loadable, concrete, extends
``yii\\web\\Controller`` and has at least one public ``action*`` method.
Every other outcome skips the candidate silently.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType

from actionroutes.config import BASE_CONTROLLER
from actionroutes.errors import PhpSyntaxError
from actionroutes.naming import NAMESPACE_SEPARATOR, is_action_method
from actionroutes.php.reflection import ClassReflection, ClassReflector
from actionroutes.php.values import read_php_return

logger = logging.getLogger("actionroutes.discovery")

AUTOLOAD_PSR4 = Path("vendor") / "composer" / "autoload_psr4.php"
CONTROLLER_GLOB = "*Controller.php"


def load_autoload_map(project_root: str | Path | None) -> Mapping[str, tuple[str, ...]]:
    """Read Composer's PSR-4 table for a project.

    Returns an empty mapping when the project root is unknown or the
    autoload file is missing or unreadable.
    """
    if project_root is None:
        return MappingProxyType({})
    path = Path(project_root) / AUTOLOAD_PSR4
    if not path.is_file():
        logger.debug("No autoload table at %s", path)
        return MappingProxyType({})
    try:
        table = read_php_return(path)
    except (OSError, PhpSyntaxError) as exc:
        logger.debug("Cannot read autoload table %s: %s", path, exc)
        return MappingProxyType({})
    return MappingProxyType(_normalize_autoload(table))


def _normalize_autoload(table: object) -> dict[str, tuple[str, ...]]:
    if not isinstance(table, dict):
        return {}
    result: dict[str, tuple[str, ...]] = {}
    for prefix, dirs in table.items():
        if not isinstance(prefix, str):
            continue
        if isinstance(dirs, str):
            dirs = [dirs]
        if not isinstance(dirs, list):
            continue
        result[prefix] = tuple(d for d in dirs if isinstance(d, str))
    return result


def controller_directories(
    namespace: str,
    autoload: Mapping[str, Sequence[str]],
) -> list[Path]:
    """Directories that may hold classes of ``namespace``.

    Every autoload prefix that prefixes ``namespace + "\\"`` contributes
    its base directories joined with the remaining namespace path.
    Nonexistent directories are left out.
    """
    ns_prefix = namespace + NAMESPACE_SEPARATOR
    directories: list[Path] = []
    for prefix, dirs in autoload.items():
        if not ns_prefix.startswith(prefix):
            continue
        relative = namespace[len(prefix):].replace(NAMESPACE_SEPARATOR, "/")
        for base in dirs:
            directory = Path(base) / relative if relative else Path(base)
            if directory.is_dir():
                directories.append(directory)
    return directories


def action_methods(reflection: ClassReflection) -> list[str]:
    """Public ``action*`` method names of a reflected class."""
    return [name for name in reflection.public_method_names() if is_action_method(name)]


def qualifies_as_controller(reflection: ClassReflection, base_controller: str) -> bool:
    return not reflection.is_abstract and reflection.is_subclass_of(base_controller)


def discover_controllers(
    namespaces: Iterable[str],
    autoload: Mapping[str, Sequence[str]],
    reflector: ClassReflector,
    *,
    base_controller: str = BASE_CONTROLLER,
) -> dict[str, tuple[str, ...]]:
    """Map controller FQCN → qualifying action method names.

    Args:
        namespaces: Controller namespaces (the handle map's values).
        autoload: PSR-4 prefix → base directories.
        reflector: Class lookup used to load and inspect candidates.
        base_controller: Class every controller must extend.

    Returns:
        Controllers with at least one action, in discovery order.
    """
    discovered: dict[str, tuple[str, ...]] = {}
    if not autoload:
        return discovered

    for namespace in namespaces:
        for directory in controller_directories(namespace, autoload):
            try:
                candidates = sorted(directory.glob(CONTROLLER_GLOB))
            except OSError as exc:
                logger.debug("Cannot list %s: %s", directory, exc)
                continue
            for candidate in candidates:
                fqcn = f"{namespace}{NAMESPACE_SEPARATOR}{candidate.stem}"
                actions = _reflect_candidate(fqcn, reflector, base_controller)
                if actions:
                    discovered[fqcn] = tuple(actions)

    return discovered


def _reflect_candidate(
    fqcn: str,
    reflector: ClassReflector,
    base_controller: str,
) -> list[str]:
    try:
        reflection = reflector.reflect(fqcn)
        if reflection is None:
            logger.debug("Skipping %s: class not loadable", fqcn)
            return []
        if not qualifies_as_controller(reflection, base_controller):
            logger.debug("Skipping %s: abstract or not a %s", fqcn, base_controller)
            return []
        return action_methods(reflection)
    except Exception:
        logger.debug("Skipping %s: reflection failed", fqcn, exc_info=True)
        return []
