"""Check configuration.

CheckConfig is a frozen dataclass — immutable after creation, no string-key
dict lookups.  Paths are resolved relative to the working directory the
check runs in.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

CORE_HANDLE = ""
CORE_NAMESPACE = "craft\\controllers"
BASE_CONTROLLER = "yii\\web\\Controller"
DEFAULT_ACTION_PROPERTY = "defaultAction"
DEFAULT_ACTION_ID = "index"
DIAGNOSTIC_IDENTIFIER = "craftcms.invalidActionInput"


@dataclass(frozen=True, slots=True)
class CheckConfig:
    """Inputs of one analysis run. Immutable after creation.

    All fields have defaults matching a standard Craft project layout::

        config = CheckConfig(
            template_paths=("templates", "modules/blog/templates"),
            handles=(("shop", "modules\\\\shop\\\\web\\\\controllers"),),
        )
    """

    # Project
    config_path: str | Path = "config/app.php"

    # Manual handle -> controller namespace overrides, applied last
    handles: tuple[tuple[str, str], ...] = ()

    # Explicit PSR-4 table; None reads vendor/composer/autoload_psr4.php
    autoload: Mapping[str, Sequence[str]] | None = None

    # Templates
    template_paths: tuple[str | Path, ...] = ("templates",)
    template_extension: str = ".twig"

    # Extra PHP source trees whose controllers count as collected data
    scan_paths: tuple[str | Path, ...] = ()

    # Externally collected controller FQCN -> action method names
    collected: Mapping[str, Sequence[str]] | None = None

    # Framework conventions
    core_namespace: str = CORE_NAMESPACE
    base_controller: str = BASE_CONTROLLER

    @property
    def handle_overrides(self) -> dict[str, str]:
        return dict(self.handles)
