"""
ⒸAngelaMos | 2026
analysis/scoring.py
"""
from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from infosphere.core.config import Weights
from infosphere.models import ModuleMetrics

if TYPE_CHECKING:
    from infosphere.analysis.collector import ModuleAccumulator


AREA_FLOOR = sys.float_info.epsilon


@dataclass(frozen = True)
class ShapeScore:
    """
    Volume, area, cohesion and sphericity of one module
    """
    volume: float
    area: float
    cohesion: float
    sphericity: float


class SphereScorer:
    """
    Combines accumulated counts into volume, area, cohesion and sphericity
    S = V / A^alpha, with a zero area replaced by the smallest positive float
    """
    def __init__(self, weights: Weights | None = None, alpha: float = 1.8) -> None:
        self.weights = weights or Weights()
        self.alpha = alpha

    def volume(self, acc: ModuleAccumulator) -> float:
        w = self.weights
        return (
            acc.private_method_count * w.private_method +
            (acc.calls_out_internal + acc.incoming_internal) * w.internal_call +
            acc.internal_type_count * w.internal_type
        )

    def area(self, acc: ModuleAccumulator) -> float:
        w = self.weights
        return (
            acc.exported_count * w.exported_symbol +
            acc.public_method_count * w.public_method +
            acc.external_imports * w.external_import +
            acc.outgoing_call_heuristic * w.outgoing_call +
            acc.calls_out_external * w.outgoing_call
        )

    def cohesion(self, acc: ModuleAccumulator) -> float:
        """
        Fraction of outgoing calls that stay inside the module, 1 when it makes none
        """
        if acc.calls_out_total == 0:
            return 1.0
        return acc.calls_out_internal / acc.calls_out_total

    def sphericity(self, volume: float, area: float) -> float:
        """
        V / A^alpha, always finite
        """
        area_for_s = area if area != 0 else AREA_FLOOR
        try:
            denominator = math.pow(area_for_s, self.alpha)
        except OverflowError:
            return 0.0
        if denominator == 0:
            return sys.float_info.max if volume > 0 else 0.0
        s = volume / denominator
        if math.isinf(s):
            return sys.float_info.max
        return s

    def score(self, acc: ModuleAccumulator) -> ShapeScore:
        volume = self.volume(acc)
        area = self.area(acc)
        return ShapeScore(
            volume = volume,
            area = area,
            cohesion = self.cohesion(acc),
            sphericity = self.sphericity(volume, area),
        )

    def metrics(self, path: str, acc: ModuleAccumulator) -> ModuleMetrics:
        """
        Freeze an accumulator into the final ModuleMetrics record
        """
        shape = self.score(acc)
        return ModuleMetrics(
            id = path,
            file = path,
            V = shape.volume,
            A = shape.area,
            s = shape.sphericity,
            cohesion = shape.cohesion,
            extras = acc.snapshot(),
        )
