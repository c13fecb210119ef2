"""Static readers for PHP sources — no PHP process is ever started.

- :mod:`~actionroutes.php.lexer` tokenizes source and resolves class names.
- :mod:`~actionroutes.php.values` evaluates ``return [...]`` config files.
- :mod:`~actionroutes.php.reflection` answers reflection questions about
  classes located through the PSR-4 autoload table.
"""

from actionroutes.php.reflection import (
    ClassDeclaration,
    ClassReflection,
    ClassReflector,
    SourceReflector,
    StaticClass,
    parse_classes,
)
from actionroutes.php.values import UNRESOLVED, evaluate_return, read_php_return

__all__ = [
    "UNRESOLVED",
    "ClassDeclaration",
    "ClassReflection",
    "ClassReflector",
    "SourceReflector",
    "StaticClass",
    "evaluate_return",
    "parse_classes",
    "read_php_return",
]
