import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from datasources.base import KnowledgeConnector, PlanConnector
from engine.architecture.model import Implementation, Instance, Service, ServiceConfiguration
from engine.enums import InstanceStatus, LoadBalancerType, QoSKind
from engine.metrics.snapshot import HttpEndpointMetrics, InstanceMetricsSnapshot
from engine.parameters import AnalysisParameters
from engine.qos.history import QoSCollection
from engine.qos.specification import availability, average_response_time

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

DEFAULTS = dict(
    analysis_window_size=5,
    metrics_window_size=3,
    failure_rate_threshold=0.3,
    unreachable_rate_threshold=0.3,
    qos_satisfaction_rate=0.8,
    max_boot_time_seconds=120,
)


def make_params(**overrides) -> AnalysisParameters:
    return AnalysisParameters(**{**DEFAULTS, **overrides})


def snapshot(
    service_id: str,
    instance_id: str,
    seconds_ago: float = 0,
    status: InstanceStatus = InstanceStatus.active,
    total: float = 0,
    ok: float = 0,
    duration: float = 0,
    endpoint: str = "/api",
) -> InstanceMetricsSnapshot:
    http = {}
    if status is InstanceStatus.active:
        http = {endpoint: HttpEndpointMetrics(endpoint, total, ok, duration)}
    return InstanceMetricsSnapshot(
        service_id=service_id,
        instance_id=instance_id,
        timestamp=NOW - timedelta(seconds=seconds_ago),
        status=status,
        http_metrics=http,
    )


def traffic_window(
    service_id: str, instance_id: str, requests: float, ok: float, duration: float, size: int = 3
) -> List[InstanceMetricsSnapshot]:
    """Active snapshots, most recent first, whose first-to-last delta is ``(requests, ok, duration)``."""
    window = []
    for i in range(size):
        share = (size - 1 - i) / (size - 1)
        window.append(snapshot(
            service_id, instance_id, seconds_ago=10 * i,
            total=100 + requests * share, ok=100 + ok * share, duration=10 + duration * share,
        ))
    return window


def fill(qos: QoSCollection, kind: QoSKind, values: Iterable[float]) -> None:
    for i, v in enumerate(values):
        qos.append(kind, v, NOW - timedelta(minutes=10 - i))


def make_instance(
    service_id: str,
    address: str = "10.0.0.1:8080",
    implementation_id: Optional[str] = None,
    status: InstanceStatus = InstanceStatus.active,
    current: Optional[Dict[QoSKind, float]] = None,
    latest_metrics: Optional[InstanceMetricsSnapshot] = None,
) -> Instance:
    instance = Instance(
        instance_id=f"{implementation_id or service_id + '-impl'}@{address}",
        service_id=service_id,
        status=status,
        latest_metrics=latest_metrics,
    )
    for kind, value in (current or {}).items():
        instance.qos.replace_current(kind, value, NOW - timedelta(minutes=1))
    return instance


def make_service(
    service_id: str,
    instances: Optional[List[Instance]] = None,
    min_availability: Optional[float] = 0.9,
    max_response_time: Optional[float] = 1.0,
    weights: Optional[Dict[str, float]] = None,
    dependencies: Iterable[str] = (),
    availability_history: Iterable[float] = (),
    response_time_history: Iterable[float] = (),
) -> Service:
    impl_id = f"{service_id}-impl"
    implementation = Implementation(implementation_id=impl_id)
    fill(implementation.qos, QoSKind.availability, availability_history)
    fill(implementation.qos, QoSKind.average_response_time, response_time_history)

    specs = {}
    if min_availability is not None:
        specs[QoSKind.availability] = availability(min_availability)
    if max_response_time is not None:
        specs[QoSKind.average_response_time] = average_response_time(max_response_time)

    configuration = ServiceConfiguration()
    if weights is not None:
        configuration = ServiceConfiguration(load_balancer=LoadBalancerType.weighted_random, weights=dict(weights))

    return Service(
        service_id=service_id,
        current_implementation_id=impl_id,
        implementations={impl_id: implementation},
        dependencies=set(dependencies),
        configuration=configuration,
        specifications=specs,
        instances=list(instances) if instances is not None else [make_instance(service_id)],
    )


class FakeKnowledge(KnowledgeConnector):
    """In-memory Knowledge store recording every call the loop makes."""

    def __init__(self, services: Optional[Dict[str, Service]] = None, metrics=None):
        super().__init__("http://knowledge.test")
        self.services = services or {}
        self.metrics: Dict[str, List[InstanceMetricsSnapshot]] = metrics or {}
        self.calls: List[str] = []
        self.updates = []
        self.proposed = None
        self.metrics_requests = []

    async def get_services_map(self):
        self.calls.append("services")
        return self.services

    async def get_latest_n_metrics(self, service_id, instance_id, n):
        self.metrics_requests.append((service_id, instance_id, n))
        return self.metrics.get(instance_id, [])[:n]

    async def update_service_qos_collection(self, update):
        self.calls.append("update")
        self.updates.append(update)

    async def propose_adaptation_options(self, options):
        self.calls.append("propose")
        self.proposed = options

    async def notify_module_start(self, module):
        self.calls.append(f"start:{module}")

    async def set_failed_module(self, module):
        self.calls.append(f"failed:{module}")


class FakePlan(PlanConnector):
    def __init__(self):
        super().__init__("http://plan.test")
        self.started = 0

    async def start(self):
        self.started += 1


@pytest.fixture
def params():
    return make_params()


@pytest.fixture
def knowledge():
    return FakeKnowledge()


@pytest.fixture
def plan():
    return FakePlan()
