"""
QoS history updater: appends the new latest values of a service and its instances and, once a
full analysis window exists, recomputes their current values as the window mean.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from engine.architecture.model import Service
from engine.context import IterationContext
from engine.enums import MEASURED_KINDS, QoSKind
from engine.qos.history import QoSValue
from engine.stats import InstanceStats

log = logging.getLogger(__name__)


@dataclass
class QoSUpdate:
    service_id: str
    instance_latest: Dict[str, Dict[QoSKind, QoSValue]] = field(default_factory=dict)
    service_latest: Dict[QoSKind, QoSValue] = field(default_factory=dict)
    instance_current: Dict[str, Dict[QoSKind, QoSValue]] = field(default_factory=dict)
    service_current: Dict[QoSKind, QoSValue] = field(default_factory=dict)


def _instance_weight(service: Service, stats: InstanceStats, count: int) -> float:
    if service.configuration.is_weighted:
        return service.load_balancer_weight(stats.instance.instance_id)
    return 1.0 / count


def aggregate(service: Service, instance_stats: Sequence[InstanceStats]) -> Dict[QoSKind, float]:
    """Weighted mean of the instance readings, carried-over instances included.

    Weights are renormalised over the instances that have a reading. A kind that no
    instance has a reading for is left out.
    """
    totals: Dict[QoSKind, float] = {}
    count = len(instance_stats)
    for kind in MEASURED_KINDS:
        readings = [(stats.value(kind), _instance_weight(service, stats, count)) for stats in instance_stats]
        readings = [(value, weight) for value, weight in readings if value is not None]
        weights = np.array([weight for _, weight in readings], dtype=float)
        if not readings or weights.sum() <= 0:
            log.debug("%s: no weighted %s reading for the service", service.service_id, kind.label)
            continue
        totals[kind] = float(np.average([value for value, _ in readings], weights=weights))
    return totals


def update_qos_history(
    ctx: IterationContext,
    service: Service,
    instance_stats: Sequence[InstanceStats],
) -> QoSUpdate:
    sid = service.service_id
    now = ctx.now
    n = ctx.params.analysis_window_size
    update = QoSUpdate(service_id=sid)

    for stats in instance_stats:
        if not stats.from_new_data:
            continue
        values = update.instance_latest.setdefault(stats.instance.instance_id, {})
        for kind in MEASURED_KINDS:
            values[kind] = stats.instance.qos.append(kind, stats.value(kind), now)

    if sid in ctx.to_skip:
        log.debug("%s: in transition, the new latest QoS value of the service is not computed", sid)
        return update

    implementation_qos = service.current_implementation.qos
    for kind, value in aggregate(service, instance_stats).items():
        update.service_latest[kind] = implementation_qos.append(kind, value, now)

    windows: Dict[QoSKind, List[float] | None] = {
        kind: service.latest_analysis_window(kind, n) for kind in MEASURED_KINDS
    }
    if any(w is None for w in windows.values()):
        log.debug("%s: analysis window not full yet, current values unchanged", sid)
        return update

    for kind, values in windows.items():
        update.service_current[kind] = implementation_qos.replace_current(kind, float(np.mean(values)), now)

    for instance in service.instances:
        for kind in MEASURED_KINDS:
            values = instance.qos.latest_window(kind, n, allow_partial=True)
            if not values:
                continue
            update.instance_current.setdefault(instance.instance_id, {})[kind] = (
                instance.qos.replace_current(kind, float(np.mean(values)), now)
            )

    log.debug("%s: full analysis window, current values updated", sid)
    return update
