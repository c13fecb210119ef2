"""``actionroutes check`` — action route validation command.

Builds the route index for the project, scans the template roots and
prints the result.  Exits with code 1 if any reference is invalid.
"""

import argparse
import sys

from actionroutes.checker import run_check
from actionroutes.cli._options import config_from_args, configure_logging
from actionroutes.errors import ConfigurationError
from actionroutes.reporting import REPORTERS, emit


def run_check_command(args: argparse.Namespace) -> None:
    """Validate action routes and report through the selected format.

    Raises ``SystemExit(1)`` on invalid arguments or when diagnostics
    are reported.
    """
    configure_logging(args.verbose)
    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    result = run_check(config)
    emit(result, REPORTERS[args.format]())

    if not result.ok:
        raise SystemExit(1)
