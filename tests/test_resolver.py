"""Tests for analysis/resolver.py - callee resolution and call graph tallies."""

from infosphere.analysis.collector import ModuleAccumulator
from infosphere.analysis.resolver import (
    EXTERNAL,
    UNRESOLVED,
    CallClass,
    CallGraphBuilder,
    CallTarget,
    ScopeResolver,
    TargetKind,
)


def _targets(corpus, path):
    resolver = ScopeResolver(corpus)
    module = corpus.get(path)
    return {call.text: resolver.resolve(module, call) for call in module.calls}


class TestScopeResolver:
    """Resolution of callees to declaring modules."""

    def test_local_function_is_self(self, make_corpus):
        corpus = make_corpus({"src/a.ts": "function f() {}\nf();\n"})
        assert _targets(corpus, "src/a.ts")["f"] == CallTarget.in_module("src/a.ts")

    def test_this_member_is_self(self, make_corpus, sources):
        corpus = make_corpus({"src/loop.ts": sources["loop"]})
        assert _targets(corpus, "src/loop.ts")["this.spin"].module == "src/loop.ts"

    def test_named_import(self, make_corpus, sources):
        corpus = make_corpus({"src/caller.ts": sources["caller"], "src/callee.ts": sources["callee"]})
        assert _targets(corpus, "src/caller.ts")["helper"] == CallTarget.in_module("src/callee.ts")

    def test_alias_followed_through_reexport(self, make_corpus):
        corpus = make_corpus({
            "src/app.ts": 'import { run as go } from "./index";\ngo();\n',
            "src/index.ts": 'export { run } from "./impl";\n',
            "src/impl.ts": "export function run() {}\n",
        })
        assert _targets(corpus, "src/app.ts")["go"].module == "src/impl.ts"

    def test_star_reexport_followed(self, make_corpus):
        corpus = make_corpus({
            "src/app.ts": 'import { run } from "./index";\nrun();\n',
            "src/index.ts": 'export * from "./impl";\n',
            "src/impl.ts": "export function run() {}\n",
        })
        assert _targets(corpus, "src/app.ts")["run"].module == "src/impl.ts"

    def test_reexported_import_binding_followed(self, make_corpus):
        corpus = make_corpus({
            "src/app.ts": 'import { run } from "./index";\nrun();\n',
            "src/index.ts": 'import { run } from "./impl";\nexport { run };\n',
            "src/impl.ts": "export function run() {}\n",
        })
        assert _targets(corpus, "src/app.ts")["run"].module == "src/impl.ts"

    def test_namespace_member(self, make_corpus):
        corpus = make_corpus({
            "src/app.ts": 'import * as lib from "./lib";\nlib.tool();\n',
            "src/lib.ts": "export function tool() {}\n",
        })
        assert _targets(corpus, "src/app.ts")["lib.tool"].module == "src/lib.ts"

    def test_default_import(self, make_corpus):
        corpus = make_corpus({
            "src/app.ts": 'import make from "./factory";\nmake();\n',
            "src/factory.ts": "export default function make() {}\n",
        })
        assert _targets(corpus, "src/app.ts")["make"].module == "src/factory.ts"

    def test_package_import_is_external(self, make_corpus):
        corpus = make_corpus({"src/a.ts": 'import chunk from "lodash/chunk";\nchunk([]);\n'})
        assert _targets(corpus, "src/a.ts")["chunk"] == EXTERNAL

    def test_runtime_globals_are_external(self, make_corpus):
        corpus = make_corpus({"src/a.ts": 'console.log("x");\nsetTimeout(() => 1, 0);\n'})
        targets = _targets(corpus, "src/a.ts")
        assert targets["console.log"] == EXTERNAL
        assert targets["setTimeout"] == EXTERNAL

    def test_unknown_name_is_unresolved(self, make_corpus):
        corpus = make_corpus({"src/a.ts": "mystery();\n"})
        assert _targets(corpus, "src/a.ts")["mystery"] == UNRESOLVED

    def test_relative_import_outside_corpus_is_unresolved(self, make_corpus):
        corpus = make_corpus({"src/a.ts": 'import { gone } from "./gone";\ngone();\n'})
        assert _targets(corpus, "src/a.ts")["gone"].kind == TargetKind.UNRESOLVED

    def test_member_on_local_value_is_self(self, make_corpus):
        corpus = make_corpus({"src/a.ts": "const store = { get() { return 1; } };\nstore.get();\n"})
        assert _targets(corpus, "src/a.ts")["store.get"].module == "src/a.ts"

    def test_builtin_method_on_parameter_is_external(self, make_corpus):
        corpus = make_corpus({
            "src/a.ts": "function twice(xs: number[], s: string) {\n  s.trim();\n  return xs.map((x) => x * 2);\n}\n",
        })
        targets = _targets(corpus, "src/a.ts")
        assert targets["xs.map"] == EXTERNAL
        assert targets["s.trim"] == EXTERNAL

    def test_builtin_method_on_class_field_is_external(self, make_corpus):
        corpus = make_corpus({
            "src/bag.ts": """\
class Bag {
  items: number[] = [];
  add(n: number) {
    this.items.push(n);
  }
}
""",
        })
        assert _targets(corpus, "src/bag.ts")["this.items.push"] == EXTERNAL

    def test_undeclared_member_on_local_value_is_unresolved(self, make_corpus):
        corpus = make_corpus({"src/a.ts": "function go(client: any) {\n  client.connect();\n}\n"})
        assert _targets(corpus, "src/a.ts")["client.connect"] == UNRESOLVED

    def test_member_chain_on_local_value_is_not_self(self, make_corpus):
        corpus = make_corpus({
            "src/a.ts": "const store = { get() { return 1; } };\nstore.inner.get();\nstore.inner.flush();\n",
        })
        targets = _targets(corpus, "src/a.ts")
        assert targets["store.inner.get"] == EXTERNAL
        assert targets["store.inner.flush"] == UNRESOLVED

    def test_member_of_imported_value_resolves_to_declaring_module(self, make_corpus):
        corpus = make_corpus({
            "src/app.ts": 'import { store } from "./store";\nstore.load();\nstore.missing();\n',
            "src/store.ts": "export const store = { load() {} };\n",
        })
        targets = _targets(corpus, "src/app.ts")
        assert targets["store.load"].module == "src/store.ts"
        assert targets["store.missing"] == UNRESOLVED

    def test_member_chain_on_package_import_is_external(self, make_corpus):
        corpus = make_corpus({"src/a.ts": 'import axios from "axios";\naxios.defaults.reset();\n'})
        assert _targets(corpus, "src/a.ts")["axios.defaults.reset"] == EXTERNAL

    def test_inherited_method_resolves_to_base_module(self, make_corpus):
        corpus = make_corpus({
            "src/child.ts": """\
import { Base } from "./base";
class Child extends Base {
  run() {
    this.setup();
  }
}
""",
            "src/base.ts": "export class Base {\n  setup() {}\n}\n",
        })
        assert _targets(corpus, "src/child.ts")["this.setup"].module == "src/base.ts"

    def test_shadowed_import_is_local(self, make_corpus):
        corpus = make_corpus({
            "src/a.ts": 'import { f } from "./b";\nfunction g(f: () => void) {\n  f();\n}\n',
            "src/b.ts": "export function f() {}\n",
        })
        assert _targets(corpus, "src/a.ts")["f"].module == "src/a.ts"


class TestCallGraphBuilder:
    """Classification and tallying across the corpus."""

    def _build(self, corpus):
        accumulators = {module.path: ModuleAccumulator() for module in corpus}
        graph = CallGraphBuilder(accumulators, ScopeResolver(corpus))
        for module in corpus:
            graph.tally(module)
        return accumulators

    def test_cross_module_call_credits_callee(self, make_corpus, sources):
        corpus = make_corpus({"src/caller.ts": sources["caller"], "src/callee.ts": sources["callee"]})
        accs = self._build(corpus)

        caller, callee = accs["src/caller.ts"], accs["src/callee.ts"]
        assert caller.calls_out_external == 1
        assert caller.calls_out_cross_module == 1
        assert caller.calls_out_internal == 0
        assert callee.incoming_internal == 1
        assert callee.incoming_external == 0

    def test_buckets_sum_to_total(self, make_corpus):
        corpus = make_corpus({
            "src/a.ts": """\
import { f } from "./b";
function own() {}
own();
f();
console.log(1);
mystery();
""",
            "src/b.ts": "export function f() {}\n",
        })
        acc = self._build(corpus)["src/a.ts"]

        assert acc.calls_out_total == 4
        assert acc.calls_out_internal == 1
        assert acc.calls_out_external == 3
        assert acc.calls_out_cross_module == 1
        assert acc.calls_out_true_external == 1
        assert acc.calls_out_unresolved == 1
        assert acc.calls_out_internal + acc.calls_out_external == acc.calls_out_total

    def test_self_call_gets_no_incoming_credit(self, make_corpus, sources):
        corpus = make_corpus({"src/loop.ts": sources["loop"]})
        acc = self._build(corpus)["src/loop.ts"]

        assert acc.calls_out_internal == 1
        assert acc.incoming_internal == 0

    def test_untracked_target_gets_no_credit(self, make_corpus, sources):
        corpus = make_corpus({"src/caller.ts": sources["caller"], "src/callee.ts": sources["callee"]})
        accumulators = {"src/caller.ts": ModuleAccumulator()}
        graph = CallGraphBuilder(accumulators, ScopeResolver(corpus))

        graph.tally(corpus.get("src/caller.ts"))

        assert accumulators["src/caller.ts"].calls_out_external == 1
        assert set(accumulators) == {"src/caller.ts"}

    def test_classify(self, make_corpus):
        corpus = make_corpus({"src/a.ts": "function f() {}\nf();\n"})
        module = corpus.get("src/a.ts")
        graph = CallGraphBuilder({"src/a.ts": ModuleAccumulator()}, ScopeResolver(corpus))

        (call,) = module.calls
        assert graph.classify(module, call) == (CallClass.SELF, "src/a.ts")

    def test_custom_resolver(self, make_corpus):
        class AlwaysExternal:
            def resolve(self, module, call):
                return EXTERNAL

        corpus = make_corpus({"src/a.ts": "function f() {}\nf();\nf();\n"})
        acc = ModuleAccumulator()
        CallGraphBuilder({"src/a.ts": acc}, AlwaysExternal()).tally(corpus.get("src/a.ts"))

        assert acc.calls_out_true_external == 2
        assert acc.calls_out_internal == 0
