"""
Analyse iteration runner: windowing and triage, QoS history update, adaptation decisions.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Set

from datasources.base import KnowledgeConnector
from engine.context import IterationContext
from engine.decision import adapt
from engine.metrics.snapshot import InstanceMetricsSnapshot
from engine.options import AdaptationOption
from engine.parameters import AnalysisParameters
from engine.triage import needs_metrics, triage_service
from engine.updater import QoSUpdate, update_qos_history

log = logging.getLogger(__name__)


@dataclass
class IterationResult:
    options: Dict[str, List[AdaptationOption]]
    updates: List[QoSUpdate] = field(default_factory=list)
    skipped: Set[str] = field(default_factory=set)
    verdicts: Dict[str, bool] = field(default_factory=dict)


def _summary(ctx: IterationContext) -> str:
    lines = []
    for opts in ctx.proposed.values():
        lines.extend(f"|--- PROPOSED: {opt.description}" for opt in opts)
    for opts in ctx.forced.values():
        lines.extend(f"|--- FORCED: {opt.description}" for opt in opts)
    return "\n".join(lines) or "|--- no adaptation options"


async def analyse(ctx: IterationContext, knowledge: KnowledgeConnector) -> List[QoSUpdate]:
    updates: List[QoSUpdate] = []
    n = ctx.params.metrics_window_size
    for service in ctx.services.values():
        log.debug("Analysing service %s", service.service_id)
        metrics: Dict[str, Sequence[InstanceMetricsSnapshot]] = {}
        for instance in service.instances:
            if needs_metrics(instance):
                metrics[instance.instance_id] = await knowledge.get_latest_n_metrics(
                    service.service_id, instance.instance_id, n
                )

        triage = triage_service(ctx, service, metrics)
        if not triage.stats:
            continue
        if not triage.has_new_data:
            log.warning(
                "%s: no instance with enough metrics to compute new QoS values, skipping its analysis",
                service.service_id,
            )
            continue

        update = update_qos_history(ctx, service, triage.stats)
        await knowledge.update_service_qos_collection(update)
        updates.append(update)
    return updates


async def run(
    knowledge: KnowledgeConnector,
    params: AnalysisParameters,
    now: Optional[datetime] = None,
) -> IterationResult:
    services = await knowledge.get_services_map()
    ctx = IterationContext(services=services, params=params, now=now or datetime.now(timezone.utc))

    updates = await analyse(ctx, knowledge)
    verdicts = adapt(ctx)
    log.debug("Adaptation options:\n%s", _summary(ctx))

    return IterationResult(
        options=ctx.merged_options(),
        updates=updates,
        skipped=set(ctx.to_skip),
        verdicts=verdicts,
    )
