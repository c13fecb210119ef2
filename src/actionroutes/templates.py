"""Template scanner — find ``actionInput()`` route references in Twig files.

Craft templates post forms to controller actions with::

    {{ actionInput('blog/posts/save') }}

Only literal routes are checked; a route built from an expression
(``actionInput('blog/' ~ name)``) is matched up to its first literal and
will usually be reported.  Matching works on raw bytes so that line
numbers are exact regardless of the file's encoding.
"""

import logging
import os
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from actionroutes.config import DIAGNOSTIC_IDENTIFIER
from actionroutes.routes import RouteIndex

logger = logging.getLogger("actionroutes.templates")

TEMPLATE_EXTENSION = ".twig"

# actionInput('route') or actionInput("route"); the route may not contain its own quote
_ACTION_INPUT_PATTERN = re.compile(rb"""actionInput\(\s*(?:'([^']+)'|"([^"]+)")""")


@dataclass(frozen=True, slots=True)
class TemplateReference:
    """A literal route found in a template."""

    route: str
    file: str
    line: int


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A template reference that matches no controller action."""

    message: str
    file: str
    line: int
    route: str
    identifier: str = DIAGNOSTIC_IDENTIFIER
    tip: str | None = None


def extract_references(content: bytes, file: str) -> list[TemplateReference]:
    """Extract every literal ``actionInput()`` route from template bytes.

    Lines are 1-based: the number of newlines before the literal plus one.
    """
    references: list[TemplateReference] = []
    for match in _ACTION_INPUT_PATTERN.finditer(content):
        group = 1 if match.group(1) is not None else 2
        offset = match.start(group)
        line = content.count(b"\n", 0, offset) + 1
        route = match.group(group).decode("utf-8", errors="replace")
        references.append(TemplateReference(route=route, file=file, line=line))
    return references


def read_references(path: str | Path) -> list[TemplateReference] | None:
    """Read a template and extract its references; ``None`` if unreadable."""
    file = Path(path)
    try:
        real_path = file.resolve(strict=True)
        content = real_path.read_bytes()
    except (OSError, RuntimeError) as exc:
        # RuntimeError: symlink loop, before Python 3.13
        logger.debug("Skipping unreadable template %s: %s", file, exc)
        return None
    return extract_references(content, str(real_path))


def iter_template_files(
    roots: Iterable[str | Path],
    extension: str = TEMPLATE_EXTENSION,
) -> Iterator[Path]:
    """Yield template files under each existing root, recursively.

    Missing roots and unreadable directories are skipped.  Files are yielded
    in sorted order within each directory.
    """
    for root in roots:
        root_path = Path(root)
        if not root_path.is_dir():
            logger.debug("Template root %s does not exist", root_path)
            continue
        for dirpath, dirnames, filenames in os.walk(root_path, onerror=_log_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(extension):
                    yield Path(dirpath) / filename


def _log_walk_error(exc: OSError) -> None:
    logger.debug("Skipping unreadable directory: %s", exc)


def check_references(
    references: Iterable[TemplateReference],
    index: RouteIndex,
) -> list[Diagnostic]:
    """Report every reference missing from the route index."""
    diagnostics: list[Diagnostic] = []
    for ref in references:
        if ref.route in index:
            continue
        suggestion = closest_route(ref.route, index)
        diagnostics.append(Diagnostic(
            message=f'Action route "{ref.route}" does not match any controller action.',
            file=ref.file,
            line=ref.line,
            route=ref.route,
            tip=f'Did you mean "{suggestion}"?' if suggestion else None,
        ))
    return diagnostics


def scan_templates(
    roots: Iterable[str | Path],
    index: RouteIndex,
    *,
    extension: str = TEMPLATE_EXTENSION,
) -> list[Diagnostic]:
    """Scan template roots and report references that match no route.

    The result is sorted by file and line, so it does not depend on the
    order in which files were visited.
    """
    diagnostics: list[Diagnostic] = []
    for path in iter_template_files(roots, extension):
        references = read_references(path)
        if references:
            diagnostics.extend(check_references(references, index))
    return sort_diagnostics(diagnostics)


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    return sorted(diagnostics, key=lambda d: (d.file, d.line, d.route))


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


def _edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings."""
    if len(a) > len(b):
        a, b = b, a
    prev = list(range(len(a) + 1))
    for j in range(1, len(b) + 1):
        curr = [j] + [0] * len(a)
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            curr[i] = min(curr[i - 1] + 1, prev[i] + 1, prev[i - 1] + cost)
        prev = curr
    return prev[len(a)]


def closest_route(route: str, index: RouteIndex, *, max_dist: int = 3) -> str | None:
    """Find the closest valid route by edit distance, or ``None``."""
    best: str | None = None
    best_dist = max_dist + 1
    for candidate in index:  # sorted, so ties resolve deterministically
        if abs(len(candidate) - len(route)) >= best_dist:
            continue
        dist = _edit_distance(route, candidate)
        if dist < best_dist:
            best_dist = dist
            best = candidate
    return best if best_dist <= max_dist else None
