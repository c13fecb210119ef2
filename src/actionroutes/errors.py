"""actionroutes exception hierarchy.

Only explicit user input (CLI arguments, a collected-actions file named on
the command line) raises.  Missing project files, unloadable classes and
unparseable PHP are absence, not errors, and never surface here.
"""


class ActionRoutesError(Exception):
    """Base for all actionroutes-specific errors."""


class ConfigurationError(ActionRoutesError):
    """Raised when check configuration supplied by the user is invalid.

    Typically caught by the CLI and turned into exit code 1.
    """


class PhpSyntaxError(ActionRoutesError):
    """Raised by the PHP value reader when a file has no readable ``return``.

    Callers treat it as "no entries from that source".
    """
