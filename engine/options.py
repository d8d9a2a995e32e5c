"""
Adaptation options proposed to the Plan stage.

Forced options come from hard failures (failed, unreachable or stuck instances, services
without instances) and are always applied. The other options come from sustained QoS
violations and are subject to dependency ordering.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from engine.enums import AdaptationKind, QoSKind


@dataclass(frozen=True, kw_only=True)
class AdaptationOption:
    kind: ClassVar[AdaptationKind]

    service_id: str
    implementation_id: str
    description: str
    forced: bool = False
    qos: Optional[QoSKind] = None


@dataclass(frozen=True, kw_only=True)
class AddInstanceOption(AdaptationOption):
    kind: ClassVar[AdaptationKind] = AdaptationKind.add_instance


@dataclass(frozen=True, kw_only=True)
class ShutdownInstanceOption(AdaptationOption):
    kind: ClassVar[AdaptationKind] = AdaptationKind.shutdown_instance

    instance_id: str


@dataclass(frozen=True, kw_only=True)
class ChangeLoadBalancerWeightsOption(AdaptationOption):
    kind: ClassVar[AdaptationKind] = AdaptationKind.change_load_balancer_weights


@dataclass(frozen=True, kw_only=True)
class ChangeImplementationOption(AdaptationOption):
    kind: ClassVar[AdaptationKind] = AdaptationKind.change_implementation

    instance_count: int = 0
    candidate_implementations: Tuple[str, ...] = ()
