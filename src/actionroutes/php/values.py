"""Static evaluation of PHP configuration files.

Craft and Composer keep the data this tool needs in PHP files that simply
``return`` an array::

    // vendor/composer/autoload_psr4.php
    $vendorDir = dirname(__DIR__);
    $baseDir = dirname($vendorDir);

    return array(
        'modules\\' => array($baseDir . '/modules'),
    );

The evaluator understands literals, ``array()``/``[]``, string
concatenation, variables assigned earlier in the file, ``__DIR__``,
``dirname()`` and ``Foo::class``.  Anything else (``App::env()``,
ternaries, arithmetic) evaluates to :data:`UNRESOLVED`, which callers
treat like a missing entry.  Nothing is ever executed.
"""

import os
from pathlib import Path
from typing import Any

from actionroutes.errors import PhpSyntaxError
from actionroutes.php.lexer import NameScope, TokenStream, decode_string, tokenize


class _Unresolved:
    """Marker for an expression with no static value."""

    _instance: "_Unresolved | None" = None

    def __new__(cls) -> "_Unresolved":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED: Any = _Unresolved()

_TERMINATORS = (",", ";", ")", "]", "}", "=>")
_CONSTANTS: dict[str, Any] = {"true": True, "false": False, "null": None}


def read_php_return(path: str | Path) -> Any:
    """Evaluate the top-level ``return`` of a PHP file.

    Raises:
        OSError: If the file cannot be read.
        PhpSyntaxError: If the file has no top-level ``return``.
    """
    file = Path(path)
    source = file.read_text(encoding="utf-8", errors="replace")
    return evaluate_return(source, file=file)


def evaluate_return(source: str, *, file: Path | None = None) -> Any:
    """Evaluate the top-level ``return`` expression of PHP source text."""
    return _Evaluator(source, file).run()


class _Evaluator:
    __slots__ = ("file", "scope", "stream", "variables")

    def __init__(self, source: str, file: Path | None) -> None:
        self.stream = TokenStream(tokenize(source))
        self.scope = NameScope()
        self.variables: dict[str, Any] = {}
        self.file = file

    def run(self) -> Any:
        s = self.stream
        while (token := s.peek()) is not None:
            if token.is_keyword("namespace"):
                s.next()
                name = s.next()
                if name is not None and name.kind == "name":
                    self.scope.enter_namespace(name.text)
                continue
            if token.is_keyword("use"):
                s.next()
                s.read_use_clause(self.scope)
                continue
            if token.is_keyword("function", "class"):
                # declarations carry their own returns
                s.next()
                s.skip_until("{", ";")
                if (brace := s.peek()) is not None and brace.is_op("{"):
                    s.skip_balanced()
                continue
            if token.kind == "variable":
                after = s.peek(1)
                if after is not None and after.is_op("="):
                    s.pos += 2
                    self.variables[token.text] = self.expression()
                    continue
            if token.is_keyword("return"):
                s.next()
                return self.expression()
            s.next()
        msg = "no top-level return statement"
        if self.file is not None:
            msg = f"{self.file}: {msg}"
        raise PhpSyntaxError(msg)

    # -- expressions ------------------------------------------------------

    def expression(self) -> Any:
        s = self.stream
        value = self.primary()
        while (token := s.peek()) is not None:
            if token.is_op(*_TERMINATORS):
                return value
            if token.is_op("."):
                s.next()
                value = _concat(value, self.primary())
                continue
            s.skip_until(*_TERMINATORS)
            return UNRESOLVED
        return value

    def primary(self) -> Any:
        s = self.stream
        token = s.next()
        if token is None:
            return UNRESOLVED

        if token.kind == "string":
            value = decode_string(token)
            return UNRESOLVED if value is None else value
        if token.kind == "number":
            return _number(token.text)
        if token.kind == "variable":
            return self.variables.get(token.text, UNRESOLVED)
        if token.is_op("["):
            return self.array_body("]")
        if token.is_op("("):
            value = self.expression()
            if (close := s.peek()) is not None and close.is_op(")"):
                s.next()
            return value
        if token.kind == "name":
            return self.name_expression(token.text)

        if token.kind == "heredoc":
            return UNRESOLVED

        # unary operators, casts, anything exotic
        s.pos -= 1
        s.skip_until(*_TERMINATORS)
        return UNRESOLVED

    def name_expression(self, name: str) -> Any:
        s = self.stream
        lower = name.lower()
        after = s.peek()

        if lower == "array" and after is not None and after.is_op("("):
            s.next()
            return self.array_body(")")
        if lower in _CONSTANTS:
            return _CONSTANTS[lower]
        if lower == "__dir__":
            return str(self.file.absolute().parent) if self.file is not None else UNRESOLVED
        if lower == "__file__":
            return str(self.file.absolute()) if self.file is not None else UNRESOLVED

        if after is not None and after.is_op("::"):
            s.next()
            member = s.next()
            if member is not None and member.is_keyword("class"):
                return self.scope.resolve(name)
            if (call := s.peek()) is not None and call.is_op("("):
                s.skip_balanced()
            return UNRESOLVED

        if after is not None and after.is_op("("):
            if lower == "dirname":
                return self.dirname_call()
            s.skip_balanced()
        return UNRESOLVED

    def dirname_call(self) -> Any:
        s = self.stream
        s.next()  # (
        path = self.expression()
        levels: Any = 1
        if (comma := s.peek()) is not None and comma.is_op(","):
            s.next()
            levels = self.expression()
        if (close := s.peek()) is not None and close.is_op(")"):
            s.next()
        if not isinstance(path, str) or not isinstance(levels, int) or levels < 1:
            return UNRESOLVED
        for _ in range(levels):
            path = os.path.dirname(path)
        return path

    def array_body(self, closer: str) -> Any:
        """Read array elements up to ``closer``.

        Returns a list when no element has an explicit key, otherwise a dict
        (auto-indexed elements get PHP's next integer key).
        """
        s = self.stream
        entries: dict[Any, Any] = {}
        keyed = False
        next_index = 0

        while (token := s.peek()) is not None:
            if token.is_op(closer):
                s.next()
                break
            if token.is_op(")", "]", "}"):
                s.next()
                break
            if token.is_op(","):
                s.next()
                continue
            if token.is_op("..."):
                s.skip_until(",", closer)
                continue

            start = s.pos
            value = self.expression()
            if (arrow := s.peek()) is not None and arrow.is_op("=>"):
                s.next()
                keyed = True
                key = _array_key(value)
                value = self.expression()
                if key is not UNRESOLVED:
                    entries[key] = value
                    if isinstance(key, int):
                        next_index = max(next_index, key + 1)
            else:
                entries[next_index] = value
                next_index += 1
            if s.pos == start:
                s.next()

        if not keyed:
            return list(entries.values())
        return entries


def _concat(left: Any, right: Any) -> Any:
    if isinstance(left, (str, int)) and isinstance(right, (str, int)):
        if isinstance(left, bool) or isinstance(right, bool):
            return UNRESOLVED
        return f"{left}{right}"
    return UNRESOLVED


def _number(text: str) -> Any:
    cleaned = text.replace("_", "")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return UNRESOLVED


def _array_key(value: Any) -> Any:
    """Coerce a value to a PHP array key (decimal strings become ints)."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if value.isascii() and value.isdigit() and (value == "0" or not value.startswith("0")):
            return int(value)
        return value
    return UNRESOLVED
