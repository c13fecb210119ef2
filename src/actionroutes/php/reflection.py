"""Static class reflection for PHP sources.

Native PHP reflection needs a running PHP process with the project's
autoloader, which means executing project code.  This module answers the
same questions the route checker asks of ``ReflectionClass`` by reading
source files instead:

- is the class abstract?
- does it (indirectly) extend a given base class?
- which public methods does it have, including inherited and trait methods?
- what is the declared default of a given property?

Classes are located through the project's PSR-4 autoload table, exactly
where Composer's autoloader would look, and parsed on first use.  A class
that cannot be located or parsed is "not loadable", the same outcome as a
failing ``class_exists()``.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from actionroutes.php.lexer import NameScope, Token, TokenStream, decode_string, tokenize

logger = logging.getLogger("actionroutes.reflection")

_MEMBER_MODIFIERS = frozenset({
    "public", "protected", "private", "static", "abstract", "final", "readonly", "var",
})
_CLASS_MODIFIERS = frozenset({"abstract", "final", "readonly"})
_CLASS_KINDS = frozenset({"class", "trait", "interface", "enum"})


# ---------------------------------------------------------------------------
# Reflection contract
# ---------------------------------------------------------------------------


class ClassReflection(Protocol):
    """What the route checker needs to know about a class."""

    @property
    def name(self) -> str: ...

    @property
    def is_abstract(self) -> bool: ...

    def is_subclass_of(self, base: str) -> bool: ...

    def public_method_names(self) -> tuple[str, ...]: ...

    def declared_default(self, property_name: str) -> Any: ...


class ClassReflector(Protocol):
    """Looks classes up by fully qualified name.

    Returns ``None`` when the class cannot be loaded.
    """

    def reflect(self, fqcn: str) -> ClassReflection | None: ...


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClassDeclaration:
    """A class-like declaration read from one PHP file.

    Only members declared in the file itself are listed; inheritance is
    resolved by :class:`StaticClass`.
    """

    name: str
    kind: str
    is_abstract: bool = False
    parent: str | None = None
    traits: tuple[str, ...] = ()
    public_methods: tuple[str, ...] = ()
    properties: tuple[tuple[str, str | None], ...] = ()
    path: Path | None = None

    def default_of(self, property_name: str) -> tuple[bool, str | None]:
        """Return ``(declared, default)`` for a property declared here."""
        for name, default in self.properties:
            if name == property_name:
                return True, default
        return False, None


def parse_classes(source: str, path: Path | None = None) -> list[ClassDeclaration]:
    """Parse every class, trait, interface and enum declared in ``source``."""
    return _DeclarationParser(tokenize(source), path).parse()


class _DeclarationParser:
    __slots__ = ("declarations", "path", "scope", "stream")

    def __init__(self, tokens: list[Token], path: Path | None) -> None:
        self.stream = TokenStream(tokens)
        self.scope = NameScope()
        self.path = path
        self.declarations: list[ClassDeclaration] = []

    def parse(self) -> list[ClassDeclaration]:
        s = self.stream
        modifiers: set[str] = set()
        while (token := s.next()) is not None:
            if token.is_keyword("namespace"):
                name = s.peek()
                if name is not None and name.kind == "name":
                    s.next()
                    self.scope.enter_namespace(name.text)
                else:
                    self.scope.enter_namespace("")
                modifiers.clear()
            elif token.is_keyword("use"):
                s.read_use_clause(self.scope)
            elif token.is_keyword(*_CLASS_MODIFIERS):
                modifiers.add(token.text.lower())
            elif token.is_keyword(*_CLASS_KINDS) and self._opens_declaration():
                name = s.next()
                if name is None:
                    break
                self.declarations.append(
                    self._declaration(token.text.lower(), name.text, "abstract" in modifiers),
                )
                modifiers.clear()
            elif token.is_keyword("function"):
                self._skip_function()
                modifiers.clear()
            elif token.is_op("#["):
                s.pos -= 1
                s.skip_balanced()
            else:
                modifiers.clear()
        return self.declarations

    def _opens_declaration(self) -> bool:
        """``class`` also appears in ``Foo::class`` and ``new class``."""
        s = self.stream
        if s.pos >= 2:
            prev = s.tokens[s.pos - 2]
            if prev.is_op("::") or prev.is_keyword("new"):
                return False
        name = s.peek()
        return name is not None and name.kind == "name" and "\\" not in name.text

    def _skip_function(self) -> None:
        s = self.stream
        s.skip_until("{", ";")
        token = s.peek()
        if token is not None and token.is_op("{"):
            s.skip_balanced()
        elif token is not None and token.is_op(";"):
            s.next()

    def _declaration(self, kind: str, short_name: str, is_abstract: bool) -> ClassDeclaration:
        s = self.stream
        parent: str | None = None
        while (token := s.next()) is not None and not token.is_op("{"):
            if token.is_keyword("extends") and kind == "class":
                ref = s.next()
                if ref is not None and ref.kind == "name":
                    parent = self.scope.resolve(ref.text)

        traits: list[str] = []
        methods: list[str] = []
        properties: list[tuple[str, str | None]] = []
        modifiers: set[str] = set()

        while (token := s.next()) is not None:
            if token.is_op("}"):
                break
            if token.is_op("#[", "{"):
                s.pos -= 1
                s.skip_balanced()
            elif token.is_keyword("use"):
                self._trait_use(traits)
                modifiers.clear()
            elif token.is_keyword("function"):
                name = s.next()
                if name is not None and name.is_op("&"):
                    name = s.next()
                if name is not None and name.kind == "name" and not modifiers & {"private", "protected"}:
                    methods.append(name.text)
                self._skip_function()
                modifiers.clear()
            elif token.is_keyword("const", "case"):
                s.skip_until(";")
                s.next()
                modifiers.clear()
            elif token.kind == "variable":
                self._properties(token, properties)
                modifiers.clear()
            elif token.kind == "name" and token.text.lower() in _MEMBER_MODIFIERS:
                modifiers.add(token.text.lower())
            # anything else is a type declaration

        return ClassDeclaration(
            name=self.scope.qualify(short_name),
            kind=kind,
            is_abstract=is_abstract,
            parent=parent,
            traits=tuple(traits),
            public_methods=tuple(methods),
            properties=tuple(properties),
            path=self.path,
        )

    def _trait_use(self, traits: list[str]) -> None:
        s = self.stream
        while (token := s.next()) is not None:
            if token.kind == "name":
                traits.append(self.scope.resolve(token.text))
            elif token.is_op(";"):
                return
            elif token.is_op("{"):
                # conflict resolution block: insteadof / as
                s.pos -= 1
                s.skip_balanced()
                return

    def _properties(self, first: Token, properties: list[tuple[str, str | None]]) -> None:
        s = self.stream
        variable: Token | None = first
        while variable is not None and variable.kind == "variable":
            default: str | None = None
            token = s.peek()
            if token is not None and token.is_op("="):
                s.next()
                value = s.peek()
                after = s.peek(1)
                if value is not None and after is not None and after.is_op(",", ";"):
                    default = decode_string(value)
                s.skip_until(",", ";")
            properties.append((variable.text[1:], default))

            token = s.next()
            if token is None or not token.is_op(","):
                if token is not None and not token.is_op(";"):
                    s.skip_until(";")
                    s.next()
                return
            variable = s.next()


# ---------------------------------------------------------------------------
# Reflector
# ---------------------------------------------------------------------------


class SourceReflector:
    """Reflects classes by locating and parsing their PHP source files.

    Args:
        autoload: PSR-4 table mapping namespace prefix (``"modules\\\\"``)
            to base directories, as found in Composer's
            ``vendor/composer/autoload_psr4.php``.
    """

    __slots__ = ("_autoload", "_classes", "_files")

    def __init__(self, autoload: Mapping[str, Sequence[str]] | None = None) -> None:
        prefixes = autoload or {}
        # Composer tries the longest matching prefix first
        self._autoload: list[tuple[str, tuple[str, ...]]] = sorted(
            ((prefix, tuple(dirs)) for prefix, dirs in prefixes.items()),
            key=lambda item: len(item[0]),
            reverse=True,
        )
        self._classes: dict[str, ClassDeclaration] = {}
        self._files: dict[Path, list[ClassDeclaration]] = {}

    def register_file(self, path: str | Path) -> list[ClassDeclaration]:
        """Parse a PHP file and make its declarations reflectable.

        Unreadable files declare nothing.
        """
        file = Path(path)
        try:
            key = file.resolve()
        except (OSError, RuntimeError):
            # symlink loops raise RuntimeError before Python 3.13
            key = file.absolute()
        known = self._files.get(key)
        if known is not None:
            return list(known)
        self._files[key] = []

        try:
            source = file.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.debug("Cannot read %s: %s", file, exc)
            return []

        declarations = parse_classes(source, file)
        self._files[key] = declarations
        for declaration in declarations:
            self._classes.setdefault(declaration.name.lower(), declaration)
        return list(declarations)

    def declaration(self, fqcn: str) -> ClassDeclaration | None:
        """Find the declaration of any class-like symbol, autoloading it."""
        fqcn = fqcn.strip("\\")
        key = fqcn.lower()
        found = self._classes.get(key)
        if found is not None:
            return found
        for candidate in self._candidate_files(fqcn):
            if not candidate.is_file():
                continue
            self.register_file(candidate)
            found = self._classes.get(key)
            if found is not None:
                return found
        return None

    def reflect(self, fqcn: str) -> "StaticClass | None":
        """Reflect a class; traits, interfaces and enums are not classes."""
        declaration = self.declaration(fqcn)
        if declaration is None or declaration.kind != "class":
            return None
        return StaticClass(declaration, self)

    def _candidate_files(self, fqcn: str) -> Iterator[Path]:
        for prefix, dirs in self._autoload:
            if not fqcn.startswith(prefix):
                continue
            relative = fqcn[len(prefix):].replace("\\", "/") + ".php"
            for directory in dirs:
                yield Path(directory) / relative


@dataclass(frozen=True, slots=True)
class StaticClass:
    """A class as seen through its source, with inheritance resolved lazily."""

    declaration: ClassDeclaration
    reflector: SourceReflector

    @property
    def name(self) -> str:
        return self.declaration.name

    @property
    def is_abstract(self) -> bool:
        return self.declaration.is_abstract

    def is_subclass_of(self, base: str) -> bool:
        """True when ``base`` is a proper ancestor of this class.

        The base itself need not be loadable; reaching its name in the
        ``extends`` chain is enough.
        """
        target = base.strip("\\").lower()
        seen = {self.declaration.name.lower()}
        parent = self.declaration.parent
        while parent is not None:
            key = parent.lower()
            if key == target:
                return True
            if key in seen:
                return False
            seen.add(key)
            declaration = self.reflector.declaration(parent)
            if declaration is None:
                return False
            parent = declaration.parent
        return False

    def public_method_names(self) -> tuple[str, ...]:
        names: list[str] = []
        seen: set[str] = set()
        for declaration in self._members():
            for method in declaration.public_methods:
                if method.lower() not in seen:
                    seen.add(method.lower())
                    names.append(method)
        return tuple(names)

    def declared_default(self, property_name: str) -> str | None:
        """Default value of the nearest declaration of ``property_name``.

        ``None`` when the property is undeclared, declared without a
        default, or its default is not a plain string literal.
        """
        for declaration in self._members():
            declared, default = declaration.default_of(property_name)
            if declared:
                return default
        return None

    def _members(self) -> Iterator[ClassDeclaration]:
        """Declarations contributing members, nearest first.

        Each class is followed by the traits it uses, then its parent.
        """
        seen: set[str] = set()
        current: ClassDeclaration | None = self.declaration
        while current is not None and current.name.lower() not in seen:
            seen.add(current.name.lower())
            yield current
            yield from self._traits(current, seen)
            current = self.reflector.declaration(current.parent) if current.parent else None

    def _traits(self, declaration: ClassDeclaration, seen: set[str]) -> Iterator[ClassDeclaration]:
        for trait_name in declaration.traits:
            if trait_name.lower() in seen:
                continue
            trait = self.reflector.declaration(trait_name)
            if trait is None:
                continue
            seen.add(trait.name.lower())
            yield trait
            yield from self._traits(trait, seen)
