"""
Enumerations for QoS kinds, instance status, load balancing and adaptation options

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum


class Direction(str, Enum):
    # min: the value must stay above the threshold, max: below it
    min = "min"
    max = "max"


class QoSKind(str, Enum):
    availability = "availability"
    average_response_time = "average_response_time"
    vulnerability = "vulnerability"

    @property
    def direction(self) -> Direction:
        if self is QoSKind.availability:
            return Direction.min
        return Direction.max

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    QoSKind.availability: "Availability",
    QoSKind.average_response_time: "AverageResponseTime",
    QoSKind.vulnerability: "Vulnerability",
}

# kinds computed from the metrics window; vulnerability is static per implementation
MEASURED_KINDS: tuple[QoSKind, ...] = (QoSKind.availability, QoSKind.average_response_time)


class InstanceStatus(str, Enum):
    booting = "BOOTING"
    active = "ACTIVE"
    unreachable = "UNREACHABLE"
    failed = "FAILED"
    shutdown = "SHUTDOWN"


class LoadBalancerType(str, Enum):
    round_robin = "ROUND_ROBIN"
    weighted_random = "WEIGHTED_RANDOM"


class AdaptationKind(str, Enum):
    add_instance = "add_instance"
    shutdown_instance = "shutdown_instance"
    change_load_balancer_weights = "change_load_balancer_weights"
    change_implementation = "change_implementation"
