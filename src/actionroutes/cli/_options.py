"""Argument → CheckConfig translation shared by ``check`` and ``routes``."""

import argparse
import logging

from actionroutes.collector import load_collected_file
from actionroutes.config import CheckConfig
from actionroutes.errors import ConfigurationError


def parse_handle(value: str) -> tuple[str, str]:
    """Parse ``HANDLE=NAMESPACE``; an empty handle targets the core framework.

    Raises:
        ConfigurationError: If ``=`` is missing or the namespace is empty.
    """
    handle, sep, namespace = value.partition("=")
    if not sep or not namespace:
        msg = f"Invalid --handle {value!r}: expected HANDLE=NAMESPACE"
        raise ConfigurationError(msg)
    return handle.strip(), namespace.strip()


def config_from_args(args: argparse.Namespace) -> CheckConfig:
    """Build a :class:`CheckConfig` from parsed CLI arguments.

    Raises:
        ConfigurationError: If a ``--handle`` or ``--collected`` value is invalid.
    """
    handles = tuple(parse_handle(value) for value in args.handle)
    collected = load_collected_file(args.collected) if args.collected else None

    templates = tuple(getattr(args, "templates", None) or ()) or ("templates",)
    return CheckConfig(
        config_path=args.config,
        handles=handles,
        template_paths=templates,
        template_extension=getattr(args, "extension", ".twig"),
        scan_paths=tuple(args.scan_path),
        collected=collected,
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
