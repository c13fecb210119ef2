"""Diagnostic reporters.

A reporter receives one call per invalid reference and a final call with
the whole result.  Two are built in: human-readable text and JSON (one
document, for CI tooling).
"""

import json
import sys
from typing import Protocol, TextIO

from actionroutes.checker import CheckResult
from actionroutes.templates import Diagnostic


class Reporter(Protocol):
    """Consumes diagnostics as ``(message, file, line)`` records."""

    def report(self, diagnostic: Diagnostic) -> None: ...

    def finish(self, result: CheckResult) -> None: ...


class TextReporter:
    """``file:line: message [identifier]`` lines followed by a summary."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def report(self, diagnostic: Diagnostic) -> None:
        print(
            f"{diagnostic.file}:{diagnostic.line}: {diagnostic.message} [{diagnostic.identifier}]",
            file=self.stream,
        )
        if diagnostic.tip:
            print(f"    {diagnostic.tip}", file=self.stream)

    def finish(self, result: CheckResult) -> None:
        print(result.summary().splitlines()[0], file=self.stream)
        if result.ok:
            print("No issues found.", file=self.stream)
        else:
            print(f"{len(result.diagnostics)} error(s).", file=self.stream)


class JsonReporter:
    """Buffers diagnostics and writes a single JSON document on finish."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout
        self._records: list[dict[str, object]] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self._records.append({
            "message": diagnostic.message,
            "file": diagnostic.file,
            "line": diagnostic.line,
            "route": diagnostic.route,
            "identifier": diagnostic.identifier,
            "tip": diagnostic.tip,
        })

    def finish(self, result: CheckResult) -> None:
        document = {
            "ok": result.ok,
            "totals": {
                "handles": result.handles,
                "controllers": result.controllers,
                "routes": result.routes,
                "templates_scanned": result.templates_scanned,
                "references_found": result.references_found,
                "errors": len(result.diagnostics),
            },
            "diagnostics": self._records,
        }
        json.dump(document, self.stream, indent=2)
        self.stream.write("\n")


REPORTERS: dict[str, type[TextReporter] | type[JsonReporter]] = {
    "text": TextReporter,
    "json": JsonReporter,
}


def emit(result: CheckResult, reporter: Reporter) -> None:
    """Feed every diagnostic of ``result`` to ``reporter``, then finish."""
    for diagnostic in result.diagnostics:
        reporter.report(diagnostic)
    reporter.finish(result)
