"""
ⒸAngelaMos | 2026
analysis/scanner.py
"""
from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from wcmatch import glob

from infosphere.analysis.parser import ModuleParseError, SourceModule, parse_module
from infosphere.core.logging import get_logger
from infosphere.models import LANGUAGE_EXTENSIONS, Language

if TYPE_CHECKING:
    from collections.abc import Iterator


logger = get_logger("scanner")

VENDOR_DIRS = frozenset({"node_modules", ".git"})

RESOLVE_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts", ".js", ".jsx", ".mjs", ".cjs")

SCRIPT_TO_SOURCE = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}


@dataclass
class ScannedFile:
    """
    A file selected by the include and exclude patterns
    """
    path: Path
    language: Language
    relative_path: str


class CorpusScanner:
    """
    Resolves include and exclude patterns into corpus files
    Each pattern is matched against the whole root-relative path, minimatch style
    """
    DEFAULT_INCLUDE = ["src/**/*.ts"]

    INCLUDE_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.BRACE | glob.EXTGLOB | glob.NEGATE
    EXCLUDE_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.BRACE | glob.EXTGLOB

    def __init__(
        self,
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
    ) -> None:
        """
        Initialize scanner with file patterns
        """
        self.include_patterns = include_patterns or list(self.DEFAULT_INCLUDE)
        self.exclude_patterns = exclude_patterns or []

    def is_included(self, relative_path: str) -> bool:
        return glob.globmatch(relative_path, self.include_patterns, flags = self.INCLUDE_FLAGS)

    def is_excluded(self, relative_path: str) -> bool:
        return bool(self.exclude_patterns) and glob.globmatch(
            relative_path, self.exclude_patterns, flags = self.EXCLUDE_FLAGS
        )

    def scan(self, root: Path) -> Iterator[ScannedFile]:
        """
        Walk root in file-system order and yield matching source files
        """
        if not root.is_dir():
            return

        for dirpath, dirs, files in os.walk(root):
            dirs[:] = [d for d in dirs if d not in VENDOR_DIRS]
            dir_path = Path(dirpath)

            for filename in files:
                file_path = dir_path / filename
                rel_path = file_path.relative_to(root).as_posix()

                if not self.is_included(rel_path):
                    continue

                if self.is_excluded(rel_path):
                    logger.debug("file_excluded", path = rel_path)
                    continue

                language = self._language_for(rel_path)
                if language is None:
                    continue

                yield ScannedFile(
                    path = file_path,
                    language = language,
                    relative_path = rel_path,
                )

    def _language_for(self, rel_path: str) -> Language | None:
        return LANGUAGE_EXTENSIONS.get(posixpath.splitext(rel_path)[1].lower())


@dataclass
class Corpus:
    """
    The full set of parsed modules for one run, keyed by relative path
    Iteration follows discovery order
    """
    root: Path
    modules: dict[str, SourceModule] = field(default_factory = dict)
    _export_cache: dict[str, frozenset[str]] = field(default_factory = dict, repr = False)

    def __contains__(self, path: str) -> bool:
        return path in self.modules

    def __iter__(self) -> Iterator[SourceModule]:
        return iter(self.modules.values())

    def __len__(self) -> int:
        return len(self.modules)

    def get(self, path: str) -> SourceModule | None:
        return self.modules.get(path)

    def resolve_specifier(self, from_path: str, specifier: str) -> str | None:
        """
        Map a relative or absolute import specifier to a corpus module path
        Returns None for package specifiers and paths outside the corpus
        """
        if specifier.startswith("/"):
            base = posixpath.normpath(specifier.lstrip("/"))
        elif specifier.startswith("."):
            base = posixpath.normpath(posixpath.join(posixpath.dirname(from_path), specifier))
        else:
            return None

        for candidate in self._candidates(base):
            if candidate in self.modules:
                return candidate
        return None

    def _candidates(self, base: str) -> Iterator[str]:
        yield base
        stem, ext = posixpath.splitext(base)
        for replacement in SCRIPT_TO_SOURCE.get(ext, ()):
            yield stem + replacement
        for extension in RESOLVE_EXTENSIONS:
            yield base + extension
        yield base + ".d.ts"
        for extension in RESOLVE_EXTENSIONS:
            yield posixpath.join(base, "index" + extension)

    def exported_names(self, path: str) -> frozenset[str]:
        """
        Distinct names a module exports, expanding export * through the corpus
        """
        cached = self._export_cache.get(path)
        if cached is None:
            cached = frozenset(self._collect_exports(path, set()))
            self._export_cache[path] = cached
        return cached

    def _collect_exports(self, path: str, visiting: set[str]) -> set[str]:
        module = self.modules.get(path)
        if module is None or path in visiting:
            return set()
        visiting.add(path)

        names = set(module.exports)
        for reexport in module.reexports:
            if reexport.namespace:
                names.add(reexport.namespace)
            elif reexport.names is not None:
                names.update(reexport.names)
            else:
                target = self.resolve_specifier(path, reexport.specifier)
                if target is not None:
                    names.update(n for n in self._collect_exports(target, visiting) if n != "default")

        visiting.discard(path)
        return names


def load_corpus(
    root: Path,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> Corpus:
    """
    Discover and parse every corpus module under root
    Any module that fails to decode or parse aborts the load
    """
    scanner = CorpusScanner(include_patterns, exclude_patterns)
    corpus = Corpus(root = root)

    for scanned_file in scanner.scan(root):
        try:
            source = scanned_file.path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise ModuleParseError(scanned_file.relative_path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise ModuleParseError(scanned_file.relative_path, f"unreadable: {e}") from e

        module = parse_module(scanned_file.relative_path, source, scanned_file.language)
        corpus.modules[module.path] = module
        logger.debug(
            "module_parsed",
            path = module.path,
            calls = len(module.calls),
            classes = len(module.classes),
            functions = len(module.functions),
        )

    logger.info("corpus_loaded", root = str(root), modules = len(corpus))
    return corpus
