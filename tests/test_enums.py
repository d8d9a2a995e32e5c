"""
Test cases for the enums of the Analyse engine: QoS kinds and their comparison direction,
instance status and load balancer wire values.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.enums import (
    MEASURED_KINDS,
    AdaptationKind,
    Direction,
    InstanceStatus,
    LoadBalancerType,
    QoSKind,
)


def test_qos_kind_direction():
    assert QoSKind.availability.direction is Direction.min
    assert QoSKind.average_response_time.direction is Direction.max
    assert QoSKind.vulnerability.direction is Direction.max


def test_qos_kind_labels():
    assert QoSKind.availability.label == "Availability"
    assert QoSKind.average_response_time.label == "AverageResponseTime"


def test_measured_kinds_exclude_vulnerability():
    assert MEASURED_KINDS == (QoSKind.availability, QoSKind.average_response_time)
    assert QoSKind.vulnerability not in MEASURED_KINDS


def test_wire_values():
    assert InstanceStatus("BOOTING") is InstanceStatus.booting
    assert InstanceStatus.unreachable.value == "UNREACHABLE"
    assert LoadBalancerType("WEIGHTED_RANDOM") is LoadBalancerType.weighted_random
    assert AdaptationKind.change_load_balancer_weights.value == "change_load_balancer_weights"


def test_enums_are_str():
    assert isinstance(QoSKind.availability, str)
    assert QoSKind.availability == "availability"
