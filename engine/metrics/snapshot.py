"""
Raw metrics snapshots collected by the monitor for one instance. HTTP counters are cumulative
since the instance started.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict

from engine.enums import InstanceStatus


@dataclass(frozen=True)
class HttpEndpointMetrics:
    endpoint: str
    total_count: float = 0.0
    successful_count: float = 0.0
    successful_duration: float = 0.0


@dataclass(frozen=True)
class InstanceMetricsSnapshot:
    service_id: str
    instance_id: str
    timestamp: datetime
    status: InstanceStatus = InstanceStatus.active
    http_metrics: Dict[str, HttpEndpointMetrics] = field(default_factory=dict)

    @property
    def active(self) -> bool:
        return self.status is InstanceStatus.active

    @property
    def failed(self) -> bool:
        return self.status is InstanceStatus.failed

    @property
    def unreachable(self) -> bool:
        return self.status is InstanceStatus.unreachable
