"""
ⒸAngelaMos | 2026
analysis/resolver.py
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Protocol

from infosphere.analysis.parser import BindingKind, CalleeKind
from infosphere.core.logging import get_logger

if TYPE_CHECKING:
    from infosphere.analysis.collector import ModuleAccumulator
    from infosphere.analysis.parser import Binding, CallSite, ParsedClass, Scope, SourceModule
    from infosphere.analysis.scanner import Corpus


logger = get_logger("resolver")


class TargetKind(str, Enum):
    MODULE = "module"
    EXTERNAL = "external"
    UNRESOLVED = "unresolved"


@dataclass(frozen = True)
class CallTarget:
    """
    Where a call's callee is declared
    """
    kind: TargetKind
    module: str | None = None

    @classmethod
    def in_module(cls, path: str) -> CallTarget:
        return cls(TargetKind.MODULE, path)


EXTERNAL = CallTarget(TargetKind.EXTERNAL)
UNRESOLVED = CallTarget(TargetKind.UNRESOLVED)


class CallClass(str, Enum):
    """
    Classification of a call relative to its caller
    """
    SELF = "self"
    CROSS_MODULE = "cross_module"
    TRUE_EXTERNAL = "true_external"
    UNRESOLVED = "unresolved"


class SymbolResolver(Protocol):
    """
    Given a call site, report the module declaring its callee
    """
    def resolve(self, module: SourceModule, call: CallSite) -> CallTarget:
        ...


class ScopeResolver:
    """
    Resolves callees through lexical scopes, imports and re-exports of the corpus
    """
    # runtime globals whose declarations live in the standard type libraries
    GLOBALS: ClassVar[frozenset[str]] = frozenset({
        "AbortController", "Array", "ArrayBuffer", "BigInt", "Blob", "Boolean",
        "Buffer", "DataView", "Date", "Error", "EvalError", "FormData", "Function",
        "Headers", "Intl", "JSON", "Map", "Math", "Number", "Object", "Promise",
        "Proxy", "RangeError", "Reflect", "RegExp", "Request", "Response", "Set",
        "String", "Symbol", "SyntaxError", "TextDecoder", "TextEncoder", "TypeError",
        "URL", "URLSearchParams", "WeakMap", "WeakSet", "XMLHttpRequest", "alert",
        "atob", "btoa", "cancelAnimationFrame", "clearInterval", "clearTimeout",
        "console", "decodeURI", "decodeURIComponent", "document", "encodeURI",
        "encodeURIComponent", "exports", "fetch", "globalThis", "isFinite", "isNaN",
        "localStorage", "module", "navigator", "parseFloat", "parseInt", "process",
        "queueMicrotask", "require", "requestAnimationFrame", "sessionStorage",
        "setImmediate", "setInterval", "setTimeout", "structuredClone", "window",
    })

    # methods of built-in prototypes and namespaces, matched by name on any receiver
    BUILTIN_METHODS: ClassVar[frozenset[str]] = frozenset({
        # Array
        "at", "concat", "copyWithin", "entries", "every", "fill", "filter", "find",
        "findIndex", "findLast", "findLastIndex", "flat", "flatMap", "forEach",
        "includes", "indexOf", "join", "keys", "lastIndexOf", "map", "pop", "push",
        "reduce", "reduceRight", "reverse", "shift", "slice", "some", "sort",
        "splice", "toReversed", "toSorted", "toSpliced", "unshift", "values", "with",
        # String
        "charAt", "charCodeAt", "codePointAt", "endsWith", "localeCompare", "match",
        "matchAll", "normalize", "padEnd", "padStart", "repeat", "replace",
        "replaceAll", "search", "split", "startsWith", "substring", "toLowerCase",
        "toUpperCase", "trim", "trimEnd", "trimStart",
        # Object, Function, Number, Date
        "apply", "bind", "call", "hasOwnProperty", "toFixed", "toISOString",
        "toJSON", "toLocaleString", "toPrecision", "toString", "valueOf", "getTime",
        # Promise
        "catch", "finally", "then",
        # Map, Set, WeakMap
        "add", "clear", "delete", "get", "has", "set",
        # RegExp
        "exec", "test",
        # JSON, console
        "parse", "stringify", "debug", "error", "info", "log", "warn",
    })

    MAX_REEXPORT_DEPTH = 32

    def __init__(self, corpus: Corpus) -> None:
        self.corpus = corpus

    def resolve(self, module: SourceModule, call: CallSite) -> CallTarget:
        target = None
        if call.kind == CalleeKind.NAME:
            target = self._resolve_name(module, call.scope, call.root)
        elif call.kind == CalleeKind.SUPER:
            target = self._resolve_base(module, call.owner)
        elif call.kind == CalleeKind.MEMBER and call.members:
            target = self._resolve_member(module, call)
        return target or UNRESOLVED

    def _resolve_member(self, module: SourceModule, call: CallSite) -> CallTarget | None:
        """
        Resolve the called member of a.b(), never the receiver itself
        Only one member on a known receiver is followed. Longer chains and
        undeclared members fall back to the member name alone
        """
        member = call.members[-1]
        if len(call.members) == 1:
            target = self._resolve_receiver(module, call, member)
            if target is not None:
                return target
        elif self._receiver_is_external(call):
            return EXTERNAL
        return EXTERNAL if member in self.BUILTIN_METHODS else None

    def _resolve_receiver(self, module: SourceModule, call: CallSite, member: str) -> CallTarget | None:
        if call.root == "this":
            if call.owner is None:
                return None
            if member in call.owner.members:
                return CallTarget.in_module(module.path)
            return self._resolve_base(module, call.owner)

        if call.root == "super":
            return self._resolve_base(module, call.owner)

        if not call.root or call.scope is None:
            return None
        binding = call.scope.lookup(call.root)
        if binding is None:
            return EXTERNAL if call.root in self.GLOBALS else None

        if binding.kind == BindingKind.LOCAL:
            return CallTarget.in_module(module.path) if member in module.members else None

        if binding.imported == "*":
            return self._resolve_namespace_member(module, binding, member)

        target = self._resolve_import(module.path, binding)
        if target.kind != TargetKind.MODULE:
            return target
        declaring = self.corpus.get(target.module)
        if declaring is not None and member in declaring.members:
            return target
        return None

    def _receiver_is_external(self, call: CallSite) -> bool:
        """
        Whether the left-most name of a member chain is a runtime global or a package import
        """
        if not call.root or call.root in ("this", "super") or call.scope is None:
            return False
        binding = call.scope.lookup(call.root)
        if binding is None:
            return call.root in self.GLOBALS
        if binding.kind != BindingKind.IMPORT:
            return False
        return not (binding.specifier or "").startswith((".", "/"))

    def _resolve_name(self, module: SourceModule, scope: Scope | None, name: str | None) -> CallTarget | None:
        if not name or scope is None:
            return None

        binding = scope.lookup(name)
        if binding is None:
            return EXTERNAL if name in self.GLOBALS else None
        if binding.kind == BindingKind.LOCAL:
            return CallTarget.in_module(module.path)
        return self._resolve_import(module.path, binding)

    def _resolve_base(self, module: SourceModule, owner: ParsedClass | None) -> CallTarget | None:
        if owner is None or owner.base is None:
            return None
        return self._resolve_name(module, owner.scope, owner.base)

    def _resolve_import(self, from_path: str, binding: Binding) -> CallTarget:
        specifier = binding.specifier or ""
        if not specifier.startswith((".", "/")):
            return EXTERNAL

        target = self.corpus.resolve_specifier(from_path, specifier)
        if target is None:
            return UNRESOLVED
        if binding.imported == "*":
            return CallTarget.in_module(target)
        return CallTarget.in_module(self._declaring_module(target, binding.imported or "default"))

    def _resolve_namespace_member(self, module: SourceModule, binding: Binding, member: str) -> CallTarget:
        namespace = self._resolve_import(module.path, binding)
        if namespace.kind != TargetKind.MODULE or member == "[]":
            return namespace
        return CallTarget.in_module(self._declaring_module(namespace.module, member))

    def _declaring_module(self, path: str, name: str) -> str:
        """
        Follow re-exports from path until the module declaring name is found
        Falls back to the last module reached when the chain cannot be followed
        """
        visited: set[tuple[str, str]] = set()
        current, current_name = path, name

        for _ in range(self.MAX_REEXPORT_DEPTH):
            if (current, current_name) in visited:
                break
            visited.add((current, current_name))

            step = self._reexport_step(current, current_name)
            if step is None:
                break
            current, current_name = step

        return current

    def _reexport_step(self, path: str, name: str) -> tuple[str, str] | None:
        module = self.corpus.get(path)
        if module is None:
            return None

        if name in module.exports:
            local = module.exports[name]
            binding = module.scope.bindings.get(local) if local else None
            if binding is None or binding.kind != BindingKind.IMPORT or binding.imported == "*":
                return None
            target = self.corpus.resolve_specifier(path, binding.specifier or "")
            return (target, binding.imported or "default") if target else None

        for reexport in module.reexports:
            if reexport.names is not None and name in reexport.names:
                target = self.corpus.resolve_specifier(path, reexport.specifier)
                return (target, reexport.names[name]) if target else None

        if name == "default":
            return None

        for reexport in module.reexports:
            if reexport.names is None and reexport.namespace is None:
                target = self.corpus.resolve_specifier(path, reexport.specifier)
                if target is not None and name in self.corpus.exported_names(target):
                    return target, name
        return None


class CallGraphBuilder:
    """
    Second pass: classifies every call and tallies it on the accumulators
    Requires accumulators for the whole corpus before the first call is seen
    """
    def __init__(
        self,
        accumulators: dict[str, ModuleAccumulator],
        resolver: SymbolResolver,
    ) -> None:
        self.accumulators = accumulators
        self.resolver = resolver

    def classify(self, module: SourceModule, call: CallSite) -> tuple[CallClass, str | None]:
        """
        Classify a call as self, cross-module, true-external or unresolved
        """
        target = self.resolver.resolve(module, call)
        if target.kind == TargetKind.EXTERNAL:
            return CallClass.TRUE_EXTERNAL, None
        if target.kind == TargetKind.UNRESOLVED or not target.module:
            return CallClass.UNRESOLVED, None
        if target.module == module.path:
            return CallClass.SELF, target.module
        return CallClass.CROSS_MODULE, target.module

    def tally(self, module: SourceModule) -> None:
        """
        Record every call of module on its accumulator and on tracked callees
        """
        acc = self.accumulators[module.path]

        for call in module.calls:
            call_class, target = self.classify(module, call)
            acc.calls_out_total += 1

            if call_class == CallClass.SELF:
                acc.calls_out_internal += 1
                continue

            # cross-module, external and unresolved share one bucket for scoring
            acc.calls_out_external += 1

            if call_class == CallClass.TRUE_EXTERNAL:
                acc.calls_out_true_external += 1
            elif call_class == CallClass.UNRESOLVED:
                acc.calls_out_unresolved += 1
            else:
                acc.calls_out_cross_module += 1
                callee = self.accumulators.get(target)
                if callee is not None:
                    callee.incoming_internal += 1

        logger.debug(
            "calls_tallied",
            path = module.path,
            total = acc.calls_out_total,
            internal = acc.calls_out_internal,
            external = acc.calls_out_external,
        )
