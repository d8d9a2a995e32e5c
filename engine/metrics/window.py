"""
Metrics window computation: health rates over the latest snapshots of an instance and QoS
readings derived from the difference between the newest and the oldest active snapshot.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from engine.exceptions import DataUnavailableError
from engine.metrics.snapshot import InstanceMetricsSnapshot

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowRates:
    failure_rate: float
    unreachable_rate: float
    active_rate: float
    size: int

    @property
    def inactive_rate(self) -> float:
        return self.failure_rate + self.unreachable_rate

    def is_unusable(self, failure_threshold: float, unreachable_threshold: float) -> bool:
        return (
            self.unreachable_rate >= unreachable_threshold
            or self.failure_rate >= failure_threshold
            or self.inactive_rate >= 1
        )


@dataclass(frozen=True)
class EndpointTotals:
    total_count: float
    successful_count: float
    successful_duration: float


def require_full_window(snapshots: Sequence[InstanceMetricsSnapshot], size: int) -> List[InstanceMetricsSnapshot]:
    if len(snapshots) != size:
        raise DataUnavailableError(f"expected {size} metrics snapshots, got {len(snapshots)}")
    return list(snapshots)


def compute_rates(snapshots: Sequence[InstanceMetricsSnapshot]) -> WindowRates:
    n = len(snapshots)
    if n == 0:
        raise DataUnavailableError("empty metrics window")
    flags = np.array([(s.failed, s.unreachable, s.active) for s in snapshots], dtype=float)
    failure, unreachable, active = (float(v) for v in flags.sum(axis=0) / n)
    return WindowRates(failure_rate=failure, unreachable_rate=unreachable, active_rate=active, size=n)


def active_bounds(
    snapshots: Sequence[InstanceMetricsSnapshot],
) -> Tuple[InstanceMetricsSnapshot, InstanceMetricsSnapshot]:
    """Return ``(oldest, newest)`` among the active snapshots carrying HTTP metrics.

    ``snapshots`` is ordered most recent first.
    """
    active = [s for s in snapshots if s.active and s.http_metrics]
    if not active:
        raise DataUnavailableError("no active snapshot with HTTP metrics in the window")
    return active[-1], active[0]


def endpoint_totals(oldest: InstanceMetricsSnapshot, newest: InstanceMetricsSnapshot) -> EndpointTotals:
    rows = []
    for endpoint, latest in newest.http_metrics.items():
        row = [latest.total_count, latest.successful_count, latest.successful_duration]
        previous = oldest.http_metrics.get(endpoint)
        if previous is not None:
            row[0] -= previous.total_count
            row[1] -= previous.successful_count
            row[2] -= previous.successful_duration
        rows.append(row)
    if not rows:
        return EndpointTotals(0.0, 0.0, 0.0)
    total, successful, duration = (float(v) for v in np.array(rows, dtype=float).sum(axis=0))
    return EndpointTotals(total_count=total, successful_count=successful, successful_duration=duration)


def compute_availability(totals: EndpointTotals, fallback: Optional[float]) -> float:
    if totals.total_count == 0:
        log.debug("No requests in the metrics window, keeping availability %s", fallback)
        return _fallback_or_raise(fallback, "availability")
    return totals.successful_count / totals.total_count


def compute_average_response_time(totals: EndpointTotals, fallback: Optional[float]) -> float:
    if totals.successful_count == 0:
        log.debug("No successful requests in the metrics window, keeping response time %s", fallback)
        return _fallback_or_raise(fallback, "average response time")
    return totals.successful_duration / totals.successful_count


def _fallback_or_raise(fallback: Optional[float], what: str) -> float:
    if fallback is None:
        raise DataUnavailableError(f"no traffic in the window and no previous {what}")
    return fallback
