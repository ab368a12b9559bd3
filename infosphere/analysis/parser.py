"""
ⒸAngelaMos | 2026
analysis/parser.py
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from infosphere.models import Language as SourceLanguage

if TYPE_CHECKING:
    from collections.abc import Iterator


class ModuleParseError(Exception):
    """
    A corpus module could not be decoded or parsed
    """
    def __init__(self, path: str, reason: str, line: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.line = line
        location = f"{path}:{line}" if line else path
        super().__init__(f"Failed to parse {location}: {reason}")


class BindingKind(str, Enum):
    LOCAL = "local"
    IMPORT = "import"


@dataclass(frozen = True)
class Binding:
    """
    What a name refers to within a lexical scope
    Imports carry the specifier and the imported name, "*" for namespaces
    """
    kind: BindingKind
    specifier: str | None = None
    imported: str | None = None


@dataclass(eq = False)
class Scope:
    """
    A lexical scope with a link to its enclosing scope
    """
    bindings: dict[str, Binding] = field(default_factory = dict)
    parent: Scope | None = None

    def declare(self, name: str, binding: Binding | None = None) -> None:
        self.bindings[name] = binding or LOCAL

    def lookup(self, name: str) -> Binding | None:
        scope: Scope | None = self
        while scope is not None:
            binding = scope.bindings.get(name)
            if binding is not None:
                return binding
            scope = scope.parent
        return None


LOCAL = Binding(BindingKind.LOCAL)


@dataclass
class ParsedImport:
    """
    An import declaration and the local names it binds
    is_require marks import x = require("..."), which binds a name but is not an ES import
    """
    specifier: str
    line: int
    default: str | None = None
    namespace: str | None = None
    names: dict[str, str] = field(default_factory = dict)
    is_require: bool = False

    @property
    def is_relative(self) -> bool:
        return self.specifier.startswith((".", "/"))


@dataclass
class ReExport:
    """
    An export ... from declaration
    names maps exported name to the name in the source module, None for export *
    """
    specifier: str
    names: dict[str, str] | None = None
    namespace: str | None = None


@dataclass
class ParsedMethod:
    """
    A class method with its declared accessibility
    """
    name: str
    line: int
    body: str
    accessibility: str | None = None

    @property
    def is_public(self) -> bool:
        return self.accessibility not in ("private", "protected")


@dataclass
class ParsedFunction:
    """
    A top-level function declaration
    """
    name: str
    line: int
    body: str
    exported: bool = False


@dataclass(eq = False)
class ParsedClass:
    """
    A class extracted from parsed source code
    """
    name: str | None
    line: int
    methods: list[ParsedMethod] = field(default_factory = list)
    property_count: int = 0
    constructor_count: int = 0
    members: set[str] = field(default_factory = set)
    base: str | None = None
    scope: Scope | None = field(default = None, repr = False)


class CalleeKind(str, Enum):
    NAME = "name"
    MEMBER = "member"
    SUPER = "super"
    OTHER = "other"


@dataclass
class CallSite:
    """
    A call expression with enough context to resolve its callee
    root is the left-most name, "this" or "super" for member chains
    """
    line: int
    kind: CalleeKind
    text: str
    root: str | None = None
    members: tuple[str, ...] = ()
    scope: Scope | None = field(default = None, repr = False)
    owner: ParsedClass | None = field(default = None, repr = False)


@dataclass
class SourceModule:
    """
    One parsed corpus module
    exports maps each locally exported name to its local binding, None when anonymous
    members holds every class member and object literal key declared anywhere in the module
    """
    path: str
    language: SourceLanguage
    text: str
    imports: list[ParsedImport] = field(default_factory = list)
    exports: dict[str, str | None] = field(default_factory = dict)
    reexports: list[ReExport] = field(default_factory = list)
    functions: list[ParsedFunction] = field(default_factory = list)
    classes: list[ParsedClass] = field(default_factory = list)
    calls: list[CallSite] = field(default_factory = list)
    members: set[str] = field(default_factory = set)
    scope: Scope = field(default_factory = Scope, repr = False)


class ParserManager:
    """
    Thread-safe tree-sitter parser management
    Parsers are not thread-safe so we use thread-local storage
    """
    _languages: ClassVar[dict[SourceLanguage, Language]] = {}
    _local = threading.local()
    _initialized = False

    @classmethod
    def initialize(cls) -> None:
        """
        Initialize language grammars - call once at startup
        """
        if cls._initialized:
            return

        cls._languages = {
            SourceLanguage.TYPESCRIPT: Language(tstypescript.language_typescript()),
            SourceLanguage.TSX: Language(tstypescript.language_tsx()),
            SourceLanguage.JAVASCRIPT: Language(tsjs.language()),
        }
        cls._initialized = True

    @classmethod
    def get_parser(cls, language: SourceLanguage) -> Parser:
        """
        Get a thread local parser for the specified language
        """
        if not cls._initialized:
            cls.initialize()

        if not hasattr(cls._local, "parsers"):
            cls._local.parsers = {}

        if language not in cls._local.parsers:
            parser = Parser(cls._languages[language])
            cls._local.parsers[language] = parser

        return cls._local.parsers[language]

    @classmethod
    def parse(cls, source: str | bytes, language: SourceLanguage) -> Tree:
        """
        Parse source code and return the syntax tree
        """
        parser = cls.get_parser(language)
        if isinstance(source, str):
            source = source.encode("utf-8")
        return parser.parse(source)


FUNCTION_NODES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
})

CLASS_NODES = frozenset({
    "class_declaration",
    "abstract_class_declaration",
    "class",
})

TOP_LEVEL_FUNCTIONS = frozenset({
    "function_declaration",
    "generator_function_declaration",
})

NAMED_DECLARATIONS = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "internal_module",
})

VARIABLE_DECLARATIONS = frozenset({
    "lexical_declaration",
    "variable_declaration",
})

TRANSPARENT_EXPRESSIONS = frozenset({
    "parenthesized_expression",
    "non_null_expression",
    "as_expression",
    "satisfies_expression",
})


class ModuleExtractor:
    """
    Extracts declarations, exports, imports and call sites from one module
    """
    def __init__(self, path: str, source: str, language: SourceLanguage) -> None:
        """
        Parse the module source, raising ModuleParseError on syntax errors
        """
        self.path = path
        self.source = source
        self.language = language
        self.tree = ParserManager.parse(source, language)

        if self.tree.root_node.has_error:
            error_node = self._first_error(self.tree.root_node)
            line = error_node.start_point[0] + 1 if error_node else None
            raise ModuleParseError(path, "syntax error", line)

    def _node_text(self, node: Node | None) -> str:
        """
        Get the text content of a node
        """
        if node is None:
            return ""
        return node.text.decode("utf-8")

    def _first_error(self, root: Node) -> Node | None:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node
            if node.has_error:
                stack.extend(reversed(node.children))
        return None

    def extract(self) -> SourceModule:
        """
        Build the SourceModule for this file
        """
        module = SourceModule(
            path = self.path,
            language = self.language,
            text = self.source,
        )
        root = self.tree.root_node

        for child in root.named_children:
            if child.type == "import_statement":
                parsed = self._parse_import(child)
                if parsed:
                    module.imports.append(parsed)
                    self._bind_import(module.scope, parsed)
            elif child.type == "export_statement":
                self._parse_export(child, module)

        self._hoist(root, module.scope)
        self._collect_top_level(root, module)
        module.calls = list(self._collect_calls(root, module))
        return module

    def _parse_import(self, node: Node) -> ParsedImport | None:
        """
        Parse an import statement into its specifier and bindings
        """
        source_node = node.child_by_field_name("source")
        clause = None
        require_clause = None
        for child in node.named_children:
            if child.type == "import_clause":
                clause = child
            elif child.type == "import_require_clause":
                require_clause = child

        if require_clause is not None:
            source_node = require_clause.child_by_field_name("source") or self._first_of_type(
                require_clause, "string"
            )
        if source_node is None:
            return None

        parsed = ParsedImport(
            specifier = self._string_value(source_node),
            line = node.start_point[0] + 1,
            is_require = require_clause is not None,
        )

        if require_clause is not None:
            alias = self._first_of_type(require_clause, "identifier")
            if alias is not None:
                parsed.namespace = self._node_text(alias)
            return parsed

        if clause is None:
            return parsed

        for child in clause.named_children:
            if child.type == "identifier":
                parsed.default = self._node_text(child)
            elif child.type == "namespace_import":
                alias = self._first_of_type(child, "identifier")
                if alias is not None:
                    parsed.namespace = self._node_text(alias)
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name = self._node_text(spec.child_by_field_name("name"))
                    alias = spec.child_by_field_name("alias")
                    parsed.names[self._node_text(alias) if alias else name] = name
        return parsed

    def _bind_import(self, scope: Scope, parsed: ParsedImport) -> None:
        if parsed.default:
            scope.declare(parsed.default, Binding(BindingKind.IMPORT, parsed.specifier, "default"))
        if parsed.namespace:
            scope.declare(parsed.namespace, Binding(BindingKind.IMPORT, parsed.specifier, "*"))
        for local, imported in parsed.names.items():
            scope.declare(local, Binding(BindingKind.IMPORT, parsed.specifier, imported))

    def _parse_export(self, node: Node, module: SourceModule) -> None:
        """
        Record the names an export statement exposes
        """
        tokens = {c.type for c in node.children if not c.is_named}
        source_node = node.child_by_field_name("source")
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")

        if source_node is not None:
            specifier = self._string_value(source_node)
            clause = self._first_of_type(node, "export_clause")
            namespace = self._first_of_type(node, "namespace_export")
            if clause is not None:
                module.reexports.append(ReExport(specifier, names = self._export_clause(clause)))
            elif namespace is not None:
                alias = self._last_named(namespace)
                module.reexports.append(ReExport(specifier, namespace = self._node_text(alias)))
            elif "*" in tokens:
                module.reexports.append(ReExport(specifier))
            return

        if "default" in tokens:
            local = None
            if declaration is not None:
                names = self._declared_names(declaration)
                local = names[0] if names else None
            elif value is not None and value.type == "identifier":
                local = self._node_text(value)
            module.exports["default"] = local
            return

        if declaration is not None:
            for name in self._declared_names(declaration):
                module.exports[name] = name
            return

        clause = self._first_of_type(node, "export_clause")
        if clause is not None:
            for exported, local in self._export_clause(clause).items():
                module.exports[exported] = local

    def _export_clause(self, clause: Node) -> dict[str, str]:
        names: dict[str, str] = {}
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name = self._node_text(spec.child_by_field_name("name"))
            alias = spec.child_by_field_name("alias")
            names[self._node_text(alias) if alias else name] = name
        return names

    def _declared_names(self, node: Node) -> list[str]:
        """
        Names introduced by a declaration node
        """
        if node.type == "ambient_declaration":
            inner = node.named_children[0] if node.named_children else None
            return self._declared_names(inner) if inner is not None else []

        if node.type in NAMED_DECLARATIONS:
            name_node = node.child_by_field_name("name")
            return [self._node_text(name_node)] if name_node else []

        if node.type in VARIABLE_DECLARATIONS:
            names: list[str] = []
            for declarator in node.named_children:
                if declarator.type == "variable_declarator":
                    names.extend(self._pattern_names(declarator.child_by_field_name("name")))
            return names

        return []

    def _pattern_names(self, node: Node | None) -> list[str]:
        """
        Identifiers bound by a binding pattern or parameter
        """
        if node is None:
            return []
        if node.type in ("identifier", "shorthand_property_identifier_pattern"):
            return [self._node_text(node)]
        if node.type in ("required_parameter", "optional_parameter"):
            return self._pattern_names(node.child_by_field_name("pattern"))
        if node.type == "pair_pattern":
            return self._pattern_names(node.child_by_field_name("value"))
        if node.type in ("assignment_pattern", "object_assignment_pattern"):
            return self._pattern_names(node.child_by_field_name("left"))
        if node.type in ("object_pattern", "array_pattern", "rest_pattern", "formal_parameters"):
            names: list[str] = []
            for child in node.named_children:
                names.extend(self._pattern_names(child))
            return names
        return []

    def _hoist(self, root: Node, scope: Scope) -> None:
        """
        Declare every name bound within root without entering nested functions
        """
        stack = list(root.named_children)
        while stack:
            node = stack.pop()
            node_type = node.type

            if node_type in ("import_statement", "class"):
                continue

            if node_type in VARIABLE_DECLARATIONS:
                for name in self._declared_names(node):
                    scope.declare(name)
                for declarator in node.named_children:
                    initializer = declarator.child_by_field_name("value")
                    if initializer is not None:
                        stack.append(initializer)
                continue

            if node_type in NAMED_DECLARATIONS or node_type == "ambient_declaration":
                for name in self._declared_names(node):
                    scope.declare(name)
                continue

            if node_type in FUNCTION_NODES:
                continue

            if node_type == "for_in_statement":
                for name in self._pattern_names(node.child_by_field_name("left")):
                    scope.declare(name)

            stack.extend(node.named_children)

    def _collect_top_level(self, root: Node, module: SourceModule) -> None:
        """
        Gather top-level functions and classes in source order
        """
        exported_locals = {local for local in module.exports.values() if local}

        for child in root.named_children:
            exported = False
            node = child
            if child.type == "export_statement":
                node = child.child_by_field_name("declaration") or child.child_by_field_name("value")
                if node is None:
                    continue
                exported = True
                if node.type in ("function_expression", "function", "generator_function"):
                    body = node.child_by_field_name("body")
                    module.functions.append(
                        ParsedFunction(
                            name = "default",
                            line = node.start_point[0] + 1,
                            body = self._node_text(body),
                            exported = True,
                        )
                    )
                    continue

            if node.type in TOP_LEVEL_FUNCTIONS:
                name_node = node.child_by_field_name("name")
                name = self._node_text(name_node) if name_node else "default"
                body = node.child_by_field_name("body")
                module.functions.append(
                    ParsedFunction(
                        name = name,
                        line = node.start_point[0] + 1,
                        body = self._node_text(body),
                        exported = exported or name in exported_locals,
                    )
                )
            elif node.type in CLASS_NODES:
                module.classes.append(self._parse_class(node, module.scope))

    def _parse_class(self, node: Node, scope: Scope) -> ParsedClass:
        """
        Extract methods, properties and heritage of a class
        """
        name_node = node.child_by_field_name("name")
        parsed = ParsedClass(
            name = self._node_text(name_node) if name_node else None,
            line = node.start_point[0] + 1,
            scope = scope,
        )

        heritage = self._first_of_type(node, "class_heritage")
        if heritage is not None:
            parsed.base = self._heritage_base(heritage)

        body = node.child_by_field_name("body")
        if body is None:
            return parsed

        for member in body.named_children:
            member_type = member.type

            if member_type in ("public_field_definition", "field_definition"):
                member_name = member.child_by_field_name("name") or member.child_by_field_name("property")
                parsed.members.add(self._node_text(member_name))
                parsed.property_count += 1
                continue

            if member_type == "method_signature":
                parsed.members.add(self._node_text(member.child_by_field_name("name")))
                continue

            if member_type not in ("method_definition", "abstract_method_signature"):
                continue

            method_name = self._node_text(member.child_by_field_name("name"))
            parsed.members.add(method_name)

            if method_name == "constructor":
                parsed.constructor_count += 1
                params = member.child_by_field_name("parameters")
                for param in params.named_children if params else []:
                    if self._first_of_type(param, "accessibility_modifier") is not None:
                        parsed.members.update(self._pattern_names(param))
                continue

            if any(c.type in ("get", "set") and not c.is_named for c in member.children):
                continue

            modifier = self._first_of_type(member, "accessibility_modifier")
            parsed.methods.append(
                ParsedMethod(
                    name = method_name,
                    line = member.start_point[0] + 1,
                    body = self._node_text(member.child_by_field_name("body")),
                    accessibility = self._node_text(modifier) if modifier else None,
                )
            )

        return parsed

    def _heritage_base(self, heritage: Node) -> str | None:
        """
        Left-most name of the extends expression, if any
        """
        expression = None
        extends = self._first_of_type(heritage, "extends_clause")
        if extends is not None:
            expression = extends.child_by_field_name("value") or (
                extends.named_children[0] if extends.named_children else None
            )
        elif heritage.named_children and heritage.named_children[0].type != "implements_clause":
            expression = heritage.named_children[0]

        if expression is None:
            return None
        root, _ = self._member_chain(expression)
        if root is not None and root.type == "identifier":
            return self._node_text(root)
        return None

    def _collect_calls(self, root: Node, module: SourceModule) -> Iterator[CallSite]:
        """
        Walk the tree yielding every call expression with its scope and owner class
        Records declared class members and object literal keys on module as it goes
        """
        stack: list[tuple[Node, Scope, ParsedClass | None]] = [(root, module.scope, None)]

        while stack:
            node, scope, owner = stack.pop()
            node_type = node.type

            if node_type == "call_expression":
                call = self._call_site(node, scope, owner)
                if call is not None:
                    yield call

            if node_type in FUNCTION_NODES:
                inner = Scope(parent = scope)
                name_node = node.child_by_field_name("name")
                if node_type in ("function_expression", "function", "generator_function") and name_node:
                    inner.declare(self._node_text(name_node))
                params = node.child_by_field_name("parameters") or node.child_by_field_name("parameter")
                for name in self._pattern_names(params):
                    inner.declare(name)
                body = node.child_by_field_name("body")
                if body is not None and body.type == "statement_block":
                    self._hoist(body, inner)
                scope = inner

            elif node_type in CLASS_NODES:
                owner = self._parse_class(node, scope)
                module.members.update(owner.members)

            elif node_type == "object":
                module.members.update(self._object_keys(node))

            elif node_type == "catch_clause":
                inner = Scope(parent = scope)
                for name in self._pattern_names(node.child_by_field_name("parameter")):
                    inner.declare(name)
                scope = inner

            for child in reversed(node.named_children):
                stack.append((child, scope, owner))

    def _object_keys(self, node: Node) -> list[str]:
        """
        Statically named keys of an object literal
        """
        keys: list[str] = []
        for child in node.named_children:
            if child.type == "shorthand_property_identifier":
                keys.append(self._node_text(child))
                continue
            if child.type == "pair":
                key = child.child_by_field_name("key")
            elif child.type == "method_definition":
                key = child.child_by_field_name("name")
            else:
                continue
            if key is None or key.type == "computed_property_name":
                continue
            keys.append(self._string_value(key) if key.type == "string" else self._node_text(key))
        return keys

    def _call_site(self, node: Node, scope: Scope, owner: ParsedClass | None) -> CallSite | None:
        """
        Describe the callee of a call expression
        Tagged templates are not calls
        """
        arguments = node.child_by_field_name("arguments")
        if arguments is not None and arguments.type == "template_string":
            return None

        callee = node.child_by_field_name("function")
        line = node.start_point[0] + 1
        text = self._node_text(callee)

        if callee is None:
            return CallSite(line = line, kind = CalleeKind.OTHER, text = text, scope = scope, owner = owner)

        callee = self._unwrap(callee)

        if callee.type == "identifier":
            return CallSite(
                line = line,
                kind = CalleeKind.NAME,
                text = text,
                root = self._node_text(callee),
                scope = scope,
                owner = owner,
            )

        if callee.type == "super":
            return CallSite(
                line = line,
                kind = CalleeKind.SUPER,
                text = text,
                root = "super",
                scope = scope,
                owner = owner,
            )

        if callee.type in ("member_expression", "subscript_expression"):
            root, members = self._member_chain(callee)
            if root is not None and root.type in ("identifier", "this", "super"):
                return CallSite(
                    line = line,
                    kind = CalleeKind.MEMBER,
                    text = text,
                    root = self._node_text(root) if root.type == "identifier" else root.type,
                    members = members,
                    scope = scope,
                    owner = owner,
                )

        return CallSite(line = line, kind = CalleeKind.OTHER, text = text, scope = scope, owner = owner)

    def _member_chain(self, node: Node) -> tuple[Node | None, tuple[str, ...]]:
        """
        Split a.b.c into its left-most expression and the member names after it
        Computed members are recorded as "[]"
        """
        members: list[str] = []
        current: Node | None = self._unwrap(node)

        while current is not None and current.type in ("member_expression", "subscript_expression"):
            if current.type == "member_expression":
                members.append(self._node_text(current.child_by_field_name("property")))
            else:
                members.append("[]")
            current = current.child_by_field_name("object")
            if current is not None:
                current = self._unwrap(current)

        members.reverse()
        return current, tuple(members)

    def _unwrap(self, node: Node) -> Node:
        while node.type in TRANSPARENT_EXPRESSIONS and node.named_children:
            node = node.named_children[0]
        return node

    def _first_of_type(self, node: Node, node_type: str) -> Node | None:
        for child in node.named_children:
            if child.type == node_type:
                return child
        return None

    def _last_named(self, node: Node) -> Node | None:
        return node.named_children[-1] if node.named_children else None

    def _string_value(self, node: Node) -> str:
        text = self._node_text(node)
        if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
            return text[1 : -1]
        return text


def parse_module(path: str, source: str, language: SourceLanguage) -> SourceModule:
    """
    Parse module source and return its extracted structure
    """
    return ModuleExtractor(path, source, language).extract()
