"""actionroutes CLI — action route validation and route listing.

Entry point registered as ``actionroutes`` in ``pyproject.toml``::

    [project.scripts]
    actionroutes = "actionroutes.cli:main"
"""

import argparse
import sys


def _add_project_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default="config/app.php",
        help="Path to the Craft app config (default: config/app.php)",
    )
    parser.add_argument(
        "--handle",
        action="append",
        default=[],
        metavar="HANDLE=NAMESPACE",
        help="Map a module handle to a controller namespace (repeatable)",
    )
    parser.add_argument(
        "--scan-path",
        action="append",
        default=[],
        metavar="DIR",
        help="Collect controllers from PHP sources under DIR (repeatable)",
    )
    parser.add_argument(
        "--collected",
        default=None,
        metavar="FILE",
        help="JSON file of controller class -> action method names",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log skipped files and classes to stderr",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``actionroutes`` command."""
    parser = argparse.ArgumentParser(
        prog="actionroutes",
        description="actionroutes — validate Craft CMS action routes used in Twig templates.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- actionroutes check -----------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate actionInput() references")
    _add_project_arguments(check_parser)
    check_parser.add_argument(
        "--templates",
        action="append",
        default=[],
        metavar="DIR",
        help="Template root to scan (repeatable, default: templates)",
    )
    check_parser.add_argument(
        "--extension",
        default=".twig",
        help="Template file extension (default: .twig)",
    )
    check_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format",
    )

    # -- actionroutes routes ----------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List valid action routes")
    _add_project_arguments(routes_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check":
        from actionroutes.cli._check import run_check_command

        run_check_command(args)
    elif args.command == "routes":
        from actionroutes.cli._routes import run_routes

        run_routes(args)
