"""actionroutes — static validation of Craft CMS action routes.

Finds ``actionInput('handle/controller/action')`` references in Twig
templates that match no controller action, without running PHP.

Basic usage::

    from actionroutes import CheckConfig, run_check

    result = run_check(CheckConfig(template_paths=("templates",)))
    print(result.summary())

Or from a project root::

    actionroutes check --templates templates
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ActionRoutesError",
    "CheckConfig",
    "CheckResult",
    "ConfigurationError",
    "Diagnostic",
    "ProjectSnapshot",
    "RouteIndex",
    "action_id_from",
    "build_routes",
    "controller_id_from",
    "discover_controllers",
    "normalize",
    "resolve_namespaces",
    "run_check",
    "scan_templates",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import actionroutes`` fast while providing a clean top-level API.
    """
    if name == "CheckConfig":
        from actionroutes.config import CheckConfig

        return CheckConfig

    if name in ("CheckResult", "ProjectSnapshot", "run_check"):
        from actionroutes import checker as _checker

        return getattr(_checker, name)

    if name in ("normalize", "controller_id_from", "action_id_from"):
        from actionroutes import naming as _naming

        return getattr(_naming, name)

    if name == "resolve_namespaces":
        from actionroutes.namespaces import resolve_namespaces

        return resolve_namespaces

    if name == "discover_controllers":
        from actionroutes.discovery import discover_controllers

        return discover_controllers

    if name in ("RouteIndex", "build_routes"):
        from actionroutes import routes as _routes

        return getattr(_routes, name)

    if name in ("Diagnostic", "scan_templates"):
        from actionroutes import templates as _templates

        return getattr(_templates, name)

    if name in ("ActionRoutesError", "ConfigurationError"):
        from actionroutes import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
