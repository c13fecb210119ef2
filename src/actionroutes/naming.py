"""Controller and action ID naming — mirrors Yii's ``Inflector::camel2id()``.

Yii derives URL identifiers from class and method names::

    EntriesController     -> entries
    CspSourcesController  -> csp-sources
    actionSaveEntry       -> save-entry

A separator goes in front of the capital letter that opens a word.  A run
of capitals (an acronym) stays one word, except that its last capital opens
a new word when a lower-case letter follows: ``CSPSources`` becomes
``csp-sources``.  Upper/lower detection uses Unicode categories, so
``ÜberPage`` behaves like ``UberPage``.
"""

import unicodedata

SEPARATOR = "-"
CONTROLLER_SUFFIX = "Controller"
ACTION_PREFIX = "action"
NAMESPACE_SEPARATOR = "\\"


def _is_upper(ch: str) -> bool:
    return unicodedata.category(ch) == "Lu"


def _is_lower(ch: str) -> bool:
    return unicodedata.category(ch) == "Ll"


def normalize(value: str) -> str:
    """Convert a camel-case identifier into a kebab-case ID.

    Idempotent: normalizing an already-normalized ID returns it unchanged.
    """
    if not value:
        return ""

    parts: list[str] = []
    last = len(value) - 1
    for i, ch in enumerate(value):
        if _is_upper(ch):
            prev_upper = i > 0 and _is_upper(value[i - 1])
            next_lower = i < last and _is_lower(value[i + 1])
            if not prev_upper or next_lower:
                parts.append(SEPARATOR)
        parts.append(ch)

    return "".join(parts).lower().strip(SEPARATOR)


def short_class_name(fqcn: str) -> str:
    """Return the last namespace segment of a fully qualified class name."""
    return fqcn.rsplit(NAMESPACE_SEPARATOR, 1)[-1]


def controller_id_from(fqcn: str) -> str:
    """Controller ID for a controller class (namespace and suffix stripped)."""
    name = short_class_name(fqcn)
    if name.endswith(CONTROLLER_SUFFIX):
        name = name[: -len(CONTROLLER_SUFFIX)]
    return normalize(name)


def action_id_from(method_name: str) -> str:
    """Action ID for an ``action*`` method name."""
    if method_name.startswith(ACTION_PREFIX):
        method_name = method_name[len(ACTION_PREFIX):]
    return normalize(method_name)


def is_action_method(method_name: str) -> bool:
    """True for public method names Yii dispatches as inline actions.

    ``action`` itself and ``actions()`` (the standalone-action map) are
    excluded.
    """
    return (
        method_name.startswith(ACTION_PREFIX)
        and method_name != ACTION_PREFIX
        and method_name != ACTION_PREFIX + "s"
    )
