"""
ⒸAngelaMos | 2026
analysis/analyzer.py
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from infosphere.analysis.collector import DeclarationCollector, ModuleAccumulator
from infosphere.analysis.parser import ParserManager
from infosphere.analysis.resolver import CallGraphBuilder, ScopeResolver
from infosphere.analysis.scanner import Corpus, load_corpus
from infosphere.analysis.scoring import SphereScorer
from infosphere.core.logging import get_logger
from infosphere.models import AnalysisResult, ModuleMetrics

if TYPE_CHECKING:
    from infosphere.analysis.resolver import SymbolResolver
    from infosphere.core.config import SphereSettings


logger = get_logger("analyzer")


def rank_modules(metrics: list[ModuleMetrics]) -> list[ModuleMetrics]:
    """
    Order modules by ascending sphericity, ties keep discovery order
    """
    return sorted(metrics, key = lambda m: m.s)


class SphereAnalyzer:
    """
    Main analysis engine
    Loads the corpus, collects declarations, builds the call graph and scores modules
    """
    def __init__(
        self,
        settings: SphereSettings,
        resolver: SymbolResolver | None = None,
    ) -> None:
        """
        Initialize the engine for one run with resolved settings
        """
        self.settings = settings
        self.root = settings.root.resolve()
        self.scorer = SphereScorer(settings.weights, settings.alpha)
        self._resolver = resolver

        ParserManager.initialize()

    def load(self) -> Corpus:
        return load_corpus(self.root, self.settings.include, self.settings.exclude)

    def analyze_corpus(self, corpus: Corpus) -> list[ModuleMetrics]:
        """
        Run both passes over an already loaded corpus and return ranked metrics
        """
        accumulators: dict[str, ModuleAccumulator] = {
            module.path: ModuleAccumulator() for module in corpus
        }

        collector = DeclarationCollector(corpus)
        for module in corpus:
            collector.collect(module, accumulators[module.path])

        resolver = self._resolver or ScopeResolver(corpus)
        graph = CallGraphBuilder(accumulators, resolver)
        for module in corpus:
            graph.tally(module)

        logger.info(
            "call_graph_built",
            modules = len(accumulators),
            calls = sum(acc.calls_out_total for acc in accumulators.values()),
        )

        metrics = [self.scorer.metrics(path, acc) for path, acc in accumulators.items()]
        return rank_modules(metrics)

    def run(self) -> AnalysisResult:
        """
        Analyze the configured corpus end to end
        """
        with structlog.contextvars.bound_contextvars(root = str(self.root)):
            corpus = self.load()
            results = self.analyze_corpus(corpus)

            logger.info(
                "analysis_complete",
                modules = len(results),
                alpha = self.settings.alpha,
            )

        return AnalysisResult(
            results = tuple(results),
            alpha = self.settings.alpha,
            thresholds = self.settings.thresholds,
        )


def analyze(settings: SphereSettings) -> AnalysisResult:
    """
    Convenience function to analyze a corpus with the given settings
    """
    return SphereAnalyzer(settings).run()
