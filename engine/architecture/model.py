"""
Architecture model of the managed system: services, their implementations and running instances.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from config import WEIGHTS_SUM_TOLERANCE
from engine.enums import InstanceStatus, LoadBalancerType, QoSKind
from engine.exceptions import ModuleExecutionError
from engine.metrics.snapshot import InstanceMetricsSnapshot
from engine.qos.history import QoSCollection, QoSValue
from engine.qos.specification import QoSSpecification


@dataclass
class Instance:
    instance_id: str
    service_id: str
    status: InstanceStatus = InstanceStatus.booting
    vulnerability_score: float = 0.0
    qos: QoSCollection = field(default_factory=QoSCollection)
    latest_metrics: Optional[InstanceMetricsSnapshot] = None

    @property
    def implementation_id(self) -> str:
        return self.instance_id.split("@", 1)[0]

    @property
    def address(self) -> str:
        return self.instance_id.split("@", 1)[-1]

    def current_value(self, kind: QoSKind) -> Optional[QoSValue]:
        return self.qos.current_value(kind)

    def latest_value(self, kind: QoSKind) -> Optional[QoSValue]:
        return self.qos.latest_value(kind)


@dataclass
class Implementation:
    implementation_id: str
    qos: QoSCollection = field(default_factory=QoSCollection)
    benchmarks: Dict[QoSKind, float] = field(default_factory=dict)
    vulnerability_score: float = 0.0


@dataclass
class ServiceConfiguration:
    load_balancer: LoadBalancerType = LoadBalancerType.round_robin
    weights: Dict[str, float] = field(default_factory=dict)

    @property
    def is_weighted(self) -> bool:
        return self.load_balancer is LoadBalancerType.weighted_random

    def weights_are_normalised(self) -> bool:
        return abs(sum(self.weights.values()) - 1.0) <= WEIGHTS_SUM_TOLERANCE


@dataclass
class Service:
    service_id: str
    current_implementation_id: str
    implementations: Dict[str, Implementation] = field(default_factory=dict)
    dependencies: Set[str] = field(default_factory=set)
    configuration: ServiceConfiguration = field(default_factory=ServiceConfiguration)
    specifications: Dict[QoSKind, QoSSpecification] = field(default_factory=dict)
    instances: List[Instance] = field(default_factory=list)
    allow_implementation_change: bool = False

    @property
    def current_implementation(self) -> Implementation:
        try:
            return self.implementations[self.current_implementation_id]
        except KeyError:
            raise ModuleExecutionError(
                f"{self.service_id}: unknown current implementation {self.current_implementation_id!r}"
            ) from None

    def load_balancer_weight(self, instance_id: str) -> float:
        return self.configuration.weights.get(instance_id, 0.0)

    def latest_analysis_window(self, kind: QoSKind, n: int) -> Optional[List[float]]:
        return self.current_implementation.qos.latest_window(kind, n)

    def current_value(self, kind: QoSKind) -> Optional[QoSValue]:
        return self.current_implementation.qos.current_value(kind)

    def should_consider_changing_implementation(self) -> bool:
        """True when a change is allowed and some alternative benchmarks better on a specified QoS."""
        if not self.allow_implementation_change:
            return False
        current = self.current_implementation
        for impl_id, impl in self.implementations.items():
            if impl_id == self.current_implementation_id:
                continue
            for kind, spec in self.specifications.items():
                candidate = impl.benchmarks.get(kind)
                reference = current.benchmarks.get(kind)
                if candidate is not None and reference is not None and spec.is_better(candidate, reference):
                    return True
        return False
