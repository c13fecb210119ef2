"""``actionroutes routes`` — list valid action routes.

Prints every route in the index, one per line and sorted, with the
handle → namespace map as a header.
"""

import argparse
import sys

from actionroutes.checker import build_index
from actionroutes.cli._options import config_from_args, configure_logging
from actionroutes.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    """List valid routes for the project described by ``args``."""
    configure_logging(args.verbose)
    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    snapshot, _, index = build_index(config)

    rows = sorted(snapshot.namespaces.items())
    width = max(max(len(handle) for handle, _ in rows), len("(core)"))
    for handle, namespace in rows:
        print(f"{handle or '(core)':<{width}}  {namespace}")
    print("-" * min(width + 2 + max(len(ns) for _, ns in rows), 80))

    if not len(index):
        print("No routes found.")
        return
    for route in index:
        print(route)
