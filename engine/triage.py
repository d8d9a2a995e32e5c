"""
Per-instance triage and metrics windowing.

For every service the instances are sorted into: ignored (shut down), pending or timed out
(booting), failed, unusable (too many failed or unreachable snapshots), lacking data, and
scored. Hard failures produce forced options and put the service in the to-skip set.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from engine.architecture.model import Instance, Service
from engine.context import IterationContext
from engine.enums import InstanceStatus, QoSKind
from engine.exceptions import DataUnavailableError
from engine.metrics import window
from engine.metrics.snapshot import InstanceMetricsSnapshot
from engine.options import AddInstanceOption, ShutdownInstanceOption
from engine.stats import InstanceStats

log = logging.getLogger(__name__)

# statuses whose instances are not scored from metrics
UNSCORED_STATUSES = frozenset({InstanceStatus.shutdown, InstanceStatus.booting, InstanceStatus.failed})


@dataclass
class ServiceTriage:
    stats: List[InstanceStats] = field(default_factory=list)
    booting: bool = False

    @property
    def has_new_data(self) -> bool:
        return any(s.from_new_data for s in self.stats)


def needs_metrics(instance: Instance) -> bool:
    return instance.status not in UNSCORED_STATUSES


def _shutdown(service: Service, instance: Instance, description: str) -> ShutdownInstanceOption:
    return ShutdownInstanceOption(
        service_id=service.service_id,
        implementation_id=service.current_implementation_id,
        instance_id=instance.instance_id,
        description=description,
        forced=True,
    )


def boot_timed_out(ctx: IterationContext, instance: Instance) -> bool:
    if instance.latest_metrics is None:
        log.warning(
            "%s: booting instance %s has no metrics snapshot, boot time cannot be measured",
            instance.service_id, instance.instance_id,
        )
        return False
    elapsed = (ctx.now - instance.latest_metrics.timestamp).total_seconds()
    return elapsed > ctx.params.max_boot_time_seconds


def score_instance(
    ctx: IterationContext,
    service: Service,
    instance: Instance,
    metrics: Sequence[InstanceMetricsSnapshot],
) -> InstanceStats | None:
    """Score one instance from its latest snapshots, most recent first.

    Returns ``None`` when the instance is unusable; in that case a forced shutdown
    has been registered and the service is marked to skip.
    """
    params = ctx.params
    try:
        snapshots = window.require_full_window(metrics, params.metrics_window_size)
    except DataUnavailableError as exc:
        # only at startup or right after an adaptation
        log.debug("%s: not enough metrics for instance %s (%s)", service.service_id, instance.instance_id, exc)
        return InstanceStats.carried_over(instance)

    rates = window.compute_rates(snapshots)
    if rates.is_unusable(params.failure_rate_threshold, params.unreachable_rate_threshold):
        log.debug(
            "%s: rates of instance %s not satisfied (failure=%.2f, unreachable=%.2f)",
            service.service_id, instance.instance_id, rates.failure_rate, rates.unreachable_rate,
        )
        ctx.force(_shutdown(service, instance, "Instance failed or unreachable"))
        ctx.skip(service.service_id)
        return None

    try:
        oldest, newest = window.active_bounds(snapshots)
        totals = window.endpoint_totals(oldest, newest)
        current_art = instance.current_value(QoSKind.average_response_time)
        current_avail = instance.current_value(QoSKind.availability)
        art = window.compute_average_response_time(totals, current_art.value if current_art else None)
        availability = window.compute_availability(totals, current_avail.value if current_avail else None)
    except DataUnavailableError as exc:
        log.debug("%s: no usable traffic for instance %s (%s)", service.service_id, instance.instance_id, exc)
        return InstanceStats.carried_over(instance)

    return InstanceStats.from_window(instance, art, availability)


def triage_service(
    ctx: IterationContext,
    service: Service,
    metrics: Dict[str, Sequence[InstanceMetricsSnapshot]],
) -> ServiceTriage:
    """Triage every instance of ``service``; ``metrics`` maps instance ids to their latest snapshots."""
    sid = service.service_id
    result = ServiceTriage()
    ctx.forced.setdefault(sid, [])

    for instance in service.instances:
        if instance.status is InstanceStatus.shutdown:
            # disappears from the architecture once no more metrics arrive
            log.debug("%s: instance %s is shut down, ignoring it", sid, instance.instance_id)
            ctx.skip(sid)
            continue
        if instance.status is InstanceStatus.booting:
            if boot_timed_out(ctx, instance):
                log.debug(
                    "%s: instance %s still booting after %ds, forcing shutdown",
                    sid, instance.instance_id, ctx.params.max_boot_time_seconds,
                )
                ctx.force(_shutdown(service, instance, "Instance boot timed out"))
            else:
                log.debug("%s: instance %s is booting, ignoring it", sid, instance.instance_id)
                result.booting = True
            ctx.skip(sid)
            continue
        if instance.status is InstanceStatus.failed:
            log.debug("%s: instance %s is FAILED, forcing shutdown", sid, instance.instance_id)
            ctx.force(_shutdown(service, instance, "Instance failed"))
            ctx.skip(sid)
            continue

        stats = score_instance(ctx, service, instance, metrics.get(instance.instance_id, []))
        if stats is not None:
            result.stats.append(stats)

    if not result.stats and not result.booting:
        log.warning("%s: no active or booting instances, forcing AddInstance", sid)
        ctx.force(AddInstanceOption(
            service_id=sid,
            implementation_id=service.current_implementation_id,
            description="No instances available",
            forced=True,
        ))
        ctx.skip(sid)
    return result
