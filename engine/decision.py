"""
Adaptation decision engine.

Each service gets a verdict: True when it requires adaptation or is completing one. The walk
over dependencies is memoised by service id, which makes it terminate on cyclic graphs. A
service whose dependency has a True verdict gets no proposed options this iteration: the
dependency is fixed first and the dependent is re-evaluated later.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from engine.architecture.model import Service
from engine.context import IterationContext
from engine.enums import MEASURED_KINDS, QoSKind
from engine.exceptions import ModuleExecutionError
from engine.options import (
    AdaptationOption,
    AddInstanceOption,
    ChangeImplementationOption,
    ChangeLoadBalancerWeightsOption,
)

log = logging.getLogger(__name__)

_WEIGHTS_REASON = {
    QoSKind.availability: "At least one instance satisfies the avg Availability specifications",
    QoSKind.average_response_time: "At least one instance satisfies the avg Response time specifications",
}
_ADD_REASON = {
    QoSKind.availability: "The service avg availability specification is not satisfied",
    QoSKind.average_response_time: "The service avg response time specification is not satisfied",
}


def analyse_qos(
    ctx: IterationContext,
    service: Service,
    kind: QoSKind,
    history: Sequence[float],
) -> List[AdaptationOption]:
    spec = service.specifications.get(kind)
    if spec is None:
        log.debug("%s: no %s specification, nothing to check", service.service_id, kind.label)
        return []

    rate = ctx.params.qos_satisfaction_rate
    if spec.satisfied_rate(history) >= rate:
        log.debug("%s: %s is satisfied at rate %s", service.service_id, kind.label, rate)
        return []

    current = service.current_value(kind)
    log.debug(
        "%s: %s is not satisfied at rate %s. Current value: %s. Threshold: %s",
        service.service_id, kind.label, rate, current.value if current else None, spec.threshold,
    )
    instances = service.instances
    below_spec = [
        i for i in instances
        if (value := i.current_value(kind)) is None or not spec.is_satisfied(value.value)
    ]

    options: List[AdaptationOption] = []
    if len(instances) > 1 and len(below_spec) < len(instances) and service.configuration.is_weighted:
        options.append(ChangeLoadBalancerWeightsOption(
            service_id=service.service_id,
            implementation_id=service.current_implementation_id,
            qos=kind,
            description=_WEIGHTS_REASON[kind],
        ))
    options.append(AddInstanceOption(
        service_id=service.service_id,
        implementation_id=service.current_implementation_id,
        qos=kind,
        description=_ADD_REASON[kind],
    ))
    return options


def change_implementation_option(service: Service, goal: QoSKind) -> ChangeImplementationOption:
    candidates = tuple(
        impl_id for impl_id in service.implementations if impl_id != service.current_implementation_id
    )
    return ChangeImplementationOption(
        service_id=service.service_id,
        implementation_id=service.current_implementation_id,
        instance_count=len(service.instances),
        candidate_implementations=candidates,
        qos=goal,
        description="Changing implementation",
    )


def compute_adaptation_options(ctx: IterationContext, service: Service, verdicts: Dict[str, bool]) -> bool:
    """Return True when ``service`` requires adaptation or is completing one.

    ``verdicts`` memoises services already visited, including those still in progress.
    """
    sid = service.service_id
    if sid in verdicts:
        return verdicts[sid]
    verdicts[sid] = ctx.has_forced_options(sid)

    if sid in ctx.to_skip:
        log.warning("%s: the analysis decided to skip adaptation for this service", sid)
        verdicts[sid] = True
        return True

    n = ctx.params.analysis_window_size
    histories = {kind: service.latest_analysis_window(kind, n) for kind in MEASURED_KINDS}
    if any(h is None for h in histories.values()):
        log.warning("%s: the analysis window is not filled yet, no adaptation options proposed", sid)
        return verdicts[sid]

    proposed: List[AdaptationOption] = []
    for kind in MEASURED_KINDS:
        proposed.extend(analyse_qos(ctx, service, kind, histories[kind]))
    if service.should_consider_changing_implementation():
        proposed.extend(change_implementation_option(service, kind) for kind in QoSKind)

    verdicts[sid] = verdicts[sid] or bool(proposed)

    for dependency_id in sorted(service.dependencies):
        dependency = ctx.services.get(dependency_id)
        if dependency is None:
            raise ModuleExecutionError(f"{sid}: dependency {dependency_id!r} not in the architecture")
        if compute_adaptation_options(ctx, dependency, verdicts):
            log.debug("%s: dependency %s has problems, solving them first", sid, dependency_id)
            return verdicts[sid]

    if verdicts[sid] and proposed:
        log.debug("%s: no problems for dependencies, proposing adaptation options", sid)
        ctx.proposed[sid] = proposed
    return verdicts[sid]


def adapt(ctx: IterationContext) -> Dict[str, bool]:
    verdicts: Dict[str, bool] = {}
    for service in ctx.services.values():
        compute_adaptation_options(ctx, service, verdicts)
    return verdicts
