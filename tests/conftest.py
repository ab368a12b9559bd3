"""Shared fixtures for Information Sphere tests."""

import os
from pathlib import Path

import pytest
import structlog

from infosphere.analysis.parser import parse_module
from infosphere.analysis.scanner import Corpus
from infosphere.models import Language


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop any logging config a CLI test bound to a captured stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SPHERE_ variables from the outer shell out of settings."""
    for key in list(os.environ):
        if key.startswith("SPHERE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def write_tree(tmp_path):
    """Write a {relative path: source} mapping under tmp_path and return the root."""

    def _write(files: dict) -> Path:
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def make_corpus(tmp_path):
    """Parse a {relative path: TypeScript source} mapping into a Corpus."""

    def _make(files: dict) -> Corpus:
        corpus = Corpus(root=tmp_path)
        for rel, text in files.items():
            corpus.modules[rel] = parse_module(rel, text, Language.TYPESCRIPT)
        return corpus

    return _make


@pytest.fixture
def ts():
    """Parse a single TypeScript source string."""

    def _parse(text: str, path: str = "src/mod.ts"):
        return parse_module(path, text, Language.TYPESCRIPT)

    return _parse


LOOP = """\
class Loop {
  private spin(n: number): number {
    return this.spin(n - 1);
  }
}
"""

API = """\
export class Api {
  open(): void {}
  close(): void {}
}

export interface Shape {
  x: number;
}

export const VERSION = "1";
"""

CALLER = """\
import { helper } from "./callee";

export function run(): number {
  return helper();
}
"""

CALLEE = """\
export function helper(): number {
  return 1;
}
"""


@pytest.fixture
def sources():
    """Small TypeScript modules used across analyzer and CLI tests."""
    return {
        "loop": LOOP,
        "api": API,
        "caller": CALLER,
        "callee": CALLEE,
    }
