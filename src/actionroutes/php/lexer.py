"""PHP tokenizer and name resolution.

Just enough of PHP's lexical grammar to walk class declarations and
``return [...]`` configuration files without executing them.  Comments,
whitespace and open/close tags are dropped; heredocs become opaque string
tokens.

Name resolution follows PHP's rules for class names: a leading ``\\`` is
fully qualified, otherwise the first segment is looked up in the file's
``use`` imports (case-insensitively) and falls back to the current
namespace.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

_TOKEN_RE = re.compile(
    r"""
    (?P<comment>//[^\n]*|\#(?!\[)[^\n]*|/\*.*?\*/)
  | (?P<tag><\?php|<\?=|<\?|\?>)
  | (?P<heredoc><<<[ \t]*(?P<hq>['"]?)(?P<hlabel>[A-Za-z_]\w*)(?P=hq)\r?\n.*?\n[ \t]*(?P=hlabel)\b)
  | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<variable>\$[A-Za-z_]\w*)
  | (?P<name>\\?[A-Za-z_]\w*(?:\\[A-Za-z_]\w*)*)
  | (?P<number>\d[\w.]*)
  | (?P<op>\#\[|\?->|::|=>|->|\?\?|\?:|\.\.\.|[{}()\[\];,=.?:&|!<>+\-*/%@^~])
  | (?P<ws>\s+)
  | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_SKIPPED = frozenset({"comment", "tag", "ws"})

_SINGLE_ESCAPES = re.compile(r"\\([\\'])")
_DOUBLE_ESCAPES = re.compile(r"\\([\\\"$nrtv0e]|x[0-9A-Fa-f]{1,2})")
_DOUBLE_ESCAPE_MAP = {
    "\\": "\\", '"': '"', "$": "$", "n": "\n", "r": "\r",
    "t": "\t", "v": "\v", "0": "\0", "e": "\x1b",
}


@dataclass(frozen=True, slots=True)
class Token:
    """A single significant PHP token."""

    kind: str
    text: str
    offset: int

    def is_op(self, *ops: str) -> bool:
        return self.kind == "op" and self.text in ops

    def is_keyword(self, *words: str) -> bool:
        """Case-insensitive keyword check (PHP keywords ignore case)."""
        return self.kind == "name" and self.text.lower() in words


def tokenize(source: str) -> list[Token]:
    """Split PHP source into significant tokens.

    Inline HTML outside ``<?php`` tags is tokenized too; controller and
    config files in practice never contain any.
    """
    return list(_iter_tokens(source))


def _iter_tokens(source: str) -> Iterator[Token]:
    for match in _TOKEN_RE.finditer(source):
        kind = match.lastgroup
        if kind in ("hq", "hlabel"):
            kind = "heredoc"
        if kind in _SKIPPED:
            continue
        yield Token(kind or "other", match.group(0), match.start())


def decode_string(token: Token) -> str | None:
    """Return the value of a string literal token.

    Double-quoted strings containing interpolation (``"$var"``, ``"{$x}"``)
    have no static value and yield ``None``.
    """
    if token.kind != "string":
        return None
    quote, body = token.text[0], token.text[1:-1]
    if quote == "'":
        return _SINGLE_ESCAPES.sub(r"\1", body)
    if re.search(r"(?<!\\)(?:\\\\)*\$[A-Za-z_{]", body):
        return None
    return _DOUBLE_ESCAPES.sub(_replace_double_escape, body)


def _replace_double_escape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq.startswith("x"):
        return chr(int(seq[1:], 16))
    return _DOUBLE_ESCAPE_MAP[seq]


@dataclass(slots=True)
class NameScope:
    """Namespace and ``use`` imports in effect at a point in a PHP file."""

    namespace: str = ""
    imports: dict[str, str] = field(default_factory=dict)

    def enter_namespace(self, namespace: str) -> None:
        self.namespace = namespace.strip("\\")
        self.imports = {}

    def add_import(self, fqcn: str, alias: str | None = None) -> None:
        fqcn = fqcn.strip("\\")
        if alias is None:
            alias = fqcn.rsplit("\\", 1)[-1]
        self.imports[alias.lower()] = fqcn

    def qualify(self, short_name: str) -> str:
        """Fully qualify a name declared in this scope (a class declaration)."""
        if self.namespace:
            return f"{self.namespace}\\{short_name}"
        return short_name

    def resolve(self, name: str) -> str:
        """Resolve a class reference to its fully qualified name."""
        if name.startswith("\\"):
            return name[1:]
        if name.lower().startswith("namespace\\"):
            return self.qualify(name[len("namespace\\"):])
        first, sep, rest = name.partition("\\")
        imported = self.imports.get(first.lower())
        if imported is not None:
            return f"{imported}{sep}{rest}" if rest else imported
        return self.qualify(name)


class TokenStream:
    """Cursor over a token list with the balanced-skip helpers both readers need."""

    __slots__ = ("pos", "tokens")

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self, ahead: int = 0) -> Token | None:
        index = self.pos + ahead
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def next(self) -> Token | None:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def skip_balanced(self) -> None:
        """Skip a bracketed group starting at the current opening token."""
        depth = 0
        while (token := self.next()) is not None:
            if token.is_op("(", "[", "{", "#["):
                depth += 1
            elif token.is_op(")", "]", "}"):
                depth -= 1
                if depth <= 0:
                    return

    def skip_until(self, *stops: str) -> Token | None:
        """Advance to the next top-level token in ``stops`` without consuming it.

        Nested brackets are skipped whole.  Stops on an unmatched closing
        bracket so callers never run past the end of their own group.
        """
        while (token := self.peek()) is not None:
            if token.is_op(*stops):
                return token
            if token.is_op("(", "[", "{", "#["):
                self.skip_balanced()
                continue
            if token.is_op(")", "]", "}"):
                return token
            self.pos += 1
        return None

    def read_use_clause(self, scope: NameScope) -> None:
        """Consume a top-level ``use`` statement into ``scope``.

        Handles aliases, comma lists and group syntax
        (``use A\\{B, C as D};``).  ``use function``/``use const``
        imports are consumed and ignored.
        """
        first = self.peek()
        if first is not None and first.is_keyword("function", "const"):
            self.skip_until(";")
            self.next()
            return

        prefix = ""
        while (token := self.next()) is not None:
            if token.is_op(";"):
                return
            if token.is_op("}"):
                prefix = ""
                continue
            if token.kind != "name":
                continue
            after = self.peek()
            if after is not None and after.kind == "other" and after.text == "\\":
                # group use: "A\B\{" lexes as name, backslash, brace
                prefix = token.text.lstrip("\\") + "\\"
                self.next()
                continue
            alias = None
            if after is not None and after.is_keyword("as"):
                self.next()
                alias_token = self.next()
                alias = alias_token.text if alias_token is not None else None
            scope.add_import(prefix + token.text, alias)
