"""
ⒸAngelaMos | 2026
analysis/__init__.py
"""
from infosphere.analysis.analyzer import SphereAnalyzer, analyze, rank_modules
from infosphere.analysis.collector import DeclarationCollector, ModuleAccumulator
from infosphere.analysis.parser import (
    CallSite,
    ModuleParseError,
    ParsedClass,
    ParsedFunction,
    ParserManager,
    SourceModule,
    parse_module,
)
from infosphere.analysis.resolver import (
    CallClass,
    CallGraphBuilder,
    CallTarget,
    ScopeResolver,
    SymbolResolver,
    TargetKind,
)
from infosphere.analysis.scanner import Corpus, CorpusScanner, load_corpus
from infosphere.analysis.scoring import ShapeScore, SphereScorer


__all__ = [
    "CallClass",
    "CallGraphBuilder",
    "CallSite",
    "CallTarget",
    "Corpus",
    "CorpusScanner",
    "DeclarationCollector",
    "ModuleAccumulator",
    "ModuleParseError",
    "ParsedClass",
    "ParsedFunction",
    "ParserManager",
    "ScopeResolver",
    "ShapeScore",
    "SourceModule",
    "SphereAnalyzer",
    "SphereScorer",
    "SymbolResolver",
    "TargetKind",
    "analyze",
    "load_corpus",
    "parse_module",
    "rank_modules",
]
