"""
ⒸAngelaMos | 2026
analysis/collector.py
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from infosphere.analysis.parser import SourceModule
    from infosphere.analysis.scanner import Corpus


@dataclass
class ModuleAccumulator:
    """
    Mutable per-module counters filled by the collector and resolver passes
    """
    exported_count: int = 0
    external_imports: int = 0
    private_method_count: int = 0
    public_method_count: int = 0
    internal_type_count: int = 0
    outgoing_call_heuristic: int = 0
    calls_out_total: int = 0
    calls_out_internal: int = 0
    calls_out_external: int = 0
    calls_out_cross_module: int = 0
    calls_out_true_external: int = 0
    calls_out_unresolved: int = 0
    incoming_internal: int = 0
    incoming_external: int = 0

    def snapshot(self) -> dict[str, int]:
        return asdict(self)


class DeclarationCollector:
    """
    First pass: counts exports, imports, methods, members and outbound call patterns
    Each module is handled independently of the others
    """
    OUTGOING_CALL_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"fetch\(|axios\.|http\.request|XMLHttpRequest"
    )

    def __init__(self, corpus: Corpus) -> None:
        self.corpus = corpus

    def collect(self, module: SourceModule, acc: ModuleAccumulator) -> None:
        """
        Populate the first-pass counters of acc from module
        """
        acc.exported_count = len(self.corpus.exported_names(module.path))
        acc.external_imports = sum(1 for imp in module.imports if not (imp.is_relative or imp.is_require))

        for cls in module.classes:
            for method in cls.methods:
                if method.is_public:
                    acc.public_method_count += 1
                else:
                    acc.private_method_count += 1
                if self.OUTGOING_CALL_PATTERN.search(method.body):
                    acc.outgoing_call_heuristic += 1
            acc.internal_type_count += cls.property_count + cls.constructor_count

        for func in module.functions:
            if func.exported:
                acc.public_method_count += 1
            else:
                acc.private_method_count += 1
            if self.OUTGOING_CALL_PATTERN.search(func.body):
                acc.outgoing_call_heuristic += 1

        # whole-text occurrences are added on top of the per-body hits
        acc.outgoing_call_heuristic += len(self.OUTGOING_CALL_PATTERN.findall(module.text))
