"""Route index — the set of action routes Craft would accept.

Each (handle, controller, action) combination becomes a route string::

    ""      + EntriesController::actionSaveEntry  -> entries/save-entry
    "blog"  + PostsController::actionIndex        -> blog/posts/index
                                                      blog/posts   (default action)

A controller belongs to every handle whose namespace prefixes its class
name.  Overlapping namespaces therefore yield the controller under each
handle; no longest-prefix rule is applied.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from actionroutes.config import DEFAULT_ACTION_ID, DEFAULT_ACTION_PROPERTY
from actionroutes.naming import NAMESPACE_SEPARATOR, action_id_from, controller_id_from, normalize
from actionroutes.php.reflection import ClassReflector

logger = logging.getLogger("actionroutes.routes")


@dataclass(frozen=True, slots=True)
class RouteIndex:
    """Immutable set of valid route strings with O(1) membership."""

    routes: frozenset[str] = frozenset()

    def __contains__(self, route: object) -> bool:
        return route in self.routes

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.routes))

    def __len__(self) -> int:
        return len(self.routes)


def format_route(handle: str, controller_id: str, action_id: str | None = None) -> str:
    """Join route segments, omitting the empty core handle."""
    segments = [handle] if handle else []
    segments.append(controller_id)
    if action_id is not None:
        segments.append(action_id)
    return "/".join(segments)


def default_action_id(fqcn: str, reflector: ClassReflector | None) -> str:
    """Resolve a controller's default action ID.

    Reads the declared default of ``$defaultAction``; an undeclared or
    empty value, an unloadable class or any reflection error yields
    ``"index"``.
    """
    if reflector is None:
        return DEFAULT_ACTION_ID
    try:
        reflection = reflector.reflect(fqcn)
        if reflection is None:
            return DEFAULT_ACTION_ID
        declared = reflection.declared_default(DEFAULT_ACTION_PROPERTY)
    except Exception:
        logger.debug("Default action lookup failed for %s", fqcn, exc_info=True)
        return DEFAULT_ACTION_ID
    if isinstance(declared, str) and declared:
        return normalize(declared)
    return DEFAULT_ACTION_ID


def handles_for(fqcn: str, handles: Iterable[tuple[str, str]]) -> list[str]:
    """Every handle whose namespace prefixes ``fqcn``."""
    return [
        handle
        for handle, namespace in handles
        if fqcn.startswith(namespace + NAMESPACE_SEPARATOR)
    ]


def build_routes(
    handles: Mapping[str, str],
    controller_actions: Mapping[str, Sequence[str]],
    *,
    reflector: ClassReflector | None = None,
) -> RouteIndex:
    """Build the route index.

    Args:
        handles: Handle → controller namespace.
        controller_actions: Controller FQCN → action method names.
        reflector: Used to read each controller's ``$defaultAction``.
            Without one every controller defaults to ``index``.
    """
    routes: set[str] = set()
    handle_items = list(handles.items())

    for fqcn, methods in controller_actions.items():
        controller_id = controller_id_from(fqcn)
        owners = handles_for(fqcn, handle_items)
        if not owners:
            continue

        default_id = default_action_id(fqcn, reflector)
        for handle in owners:
            for method in methods:
                action_id = action_id_from(method)
                routes.add(format_route(handle, controller_id, action_id))
                if action_id == default_id:
                    routes.add(format_route(handle, controller_id))

    return RouteIndex(frozenset(routes))
