"""
Metrics package exports.

Snapshots are produced by the monitor; the window helpers turn a run of
cumulative snapshots into rates and per-window QoS readings.
"""

from engine.metrics.snapshot import HttpEndpointMetrics, InstanceMetricsSnapshot
from engine.metrics.window import (
    EndpointTotals,
    WindowRates,
    active_bounds,
    compute_availability,
    compute_average_response_time,
    compute_rates,
    endpoint_totals,
    require_full_window,
)

__all__ = [
    "HttpEndpointMetrics",
    "InstanceMetricsSnapshot",
    "EndpointTotals",
    "WindowRates",
    "active_bounds",
    "compute_availability",
    "compute_average_response_time",
    "compute_rates",
    "endpoint_totals",
    "require_full_window",
]
