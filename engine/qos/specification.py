"""
QoS specifications: a threshold on one QoS kind, compared in the direction fixed by the kind.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from engine.enums import Direction, QoSKind


@dataclass(frozen=True)
class QoSSpecification:
    kind: QoSKind
    threshold: float
    weight: Optional[float] = None

    @property
    def direction(self) -> Direction:
        return self.kind.direction

    def is_satisfied(self, value: float) -> bool:
        if self.direction is Direction.min:
            return value >= self.threshold
        return value <= self.threshold

    def satisfied_rate(self, values: Optional[Sequence[float]]) -> float:
        if not values:
            return 0.0
        return sum(1 for v in values if self.is_satisfied(v)) / len(values)

    def is_satisfied_over(self, values: Optional[Sequence[float]], rate: float) -> bool:
        """True when at least ``rate`` of ``values`` meet the threshold; never for an empty window."""
        if not values:
            return False
        return self.satisfied_rate(values) >= rate

    def is_better(self, candidate: float, reference: float) -> bool:
        if self.direction is Direction.min:
            return candidate > reference
        return candidate < reference

    def constraint_description(self) -> str:
        op = ">=" if self.direction is Direction.min else "<="
        return f"value {op} {self.threshold}"

    def __str__(self) -> str:
        return f"{self.kind.label}(Weight: {self.weight}, Constraint: {self.constraint_description()})"


def availability(min_threshold: float, weight: Optional[float] = None) -> QoSSpecification:
    return QoSSpecification(QoSKind.availability, min_threshold, weight)


def average_response_time(max_threshold: float, weight: Optional[float] = None) -> QoSSpecification:
    return QoSSpecification(QoSKind.average_response_time, max_threshold, weight)


def vulnerability(max_threshold: float, weight: Optional[float] = None) -> QoSSpecification:
    return QoSSpecification(QoSKind.vulnerability, max_threshold, weight)
