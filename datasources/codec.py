"""
Wire documents exchanged with the Knowledge store, and their conversion to and from the
engine's domain objects.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from datasources.exceptions import InvalidPayload
from engine.architecture.model import Implementation, Instance, Service, ServiceConfiguration
from engine.enums import AdaptationKind, InstanceStatus, LoadBalancerType, QoSKind
from engine.metrics.snapshot import HttpEndpointMetrics, InstanceMetricsSnapshot
from engine.options import AdaptationOption
from engine.qos.history import QoSCollection, QoSHistory, QoSValue
from engine.qos.specification import QoSSpecification
from engine.updater import QoSUpdate

log = logging.getLogger(__name__)


def _utc(ts: datetime) -> datetime:
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


class QoSValueDoc(BaseModel):
    value: float
    timestamp: datetime
    invalid: bool = False

    @field_validator("timestamp")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return _utc(v)

    def to_domain(self) -> QoSValue:
        return QoSValue(self.value, self.timestamp, self.invalid)

    @classmethod
    def from_domain(cls, value: QoSValue) -> QoSValueDoc:
        return cls(value=value.value, timestamp=value.timestamp, invalid=value.invalid)


class QoSHistoryDoc(BaseModel):
    values: List[QoSValueDoc] = Field(default_factory=list)
    current: Optional[QoSValueDoc] = None

    def to_domain(self) -> QoSHistory:
        return QoSHistory(
            values=[v.to_domain() for v in self.values],
            current=self.current.to_domain() if self.current else None,
        )


def _collection(docs: Dict[QoSKind, QoSHistoryDoc]) -> QoSCollection:
    return QoSCollection(histories={kind: doc.to_domain() for kind, doc in docs.items()})


class EndpointMetricsDoc(BaseModel):
    endpoint: str = ""
    total_count: float = 0.0
    successful_count: float = 0.0
    successful_duration: float = 0.0


class MetricsSnapshotDoc(BaseModel):
    service_id: str
    instance_id: str
    timestamp: datetime
    status: InstanceStatus = InstanceStatus.active
    http_metrics: Dict[str, EndpointMetricsDoc] = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return _utc(v)

    def to_domain(self) -> InstanceMetricsSnapshot:
        return InstanceMetricsSnapshot(
            service_id=self.service_id,
            instance_id=self.instance_id,
            timestamp=self.timestamp,
            status=self.status,
            http_metrics={
                endpoint: HttpEndpointMetrics(
                    endpoint=endpoint,
                    total_count=m.total_count,
                    successful_count=m.successful_count,
                    successful_duration=m.successful_duration,
                )
                for endpoint, m in self.http_metrics.items()
            },
        )


class InstanceDoc(BaseModel):
    instance_id: str
    service_id: str
    status: InstanceStatus = InstanceStatus.booting
    vulnerability_score: float = 0.0
    qos: Dict[QoSKind, QoSHistoryDoc] = Field(default_factory=dict)
    latest_metrics: Optional[MetricsSnapshotDoc] = None

    def to_domain(self) -> Instance:
        return Instance(
            instance_id=self.instance_id,
            service_id=self.service_id,
            status=self.status,
            vulnerability_score=self.vulnerability_score,
            qos=_collection(self.qos),
            latest_metrics=self.latest_metrics.to_domain() if self.latest_metrics else None,
        )


class ImplementationDoc(BaseModel):
    implementation_id: str
    qos: Dict[QoSKind, QoSHistoryDoc] = Field(default_factory=dict)
    benchmarks: Dict[QoSKind, float] = Field(default_factory=dict)
    vulnerability_score: float = 0.0


class ConfigurationDoc(BaseModel):
    load_balancer: LoadBalancerType = LoadBalancerType.round_robin
    weights: Dict[str, float] = Field(default_factory=dict)


class SpecificationDoc(BaseModel):
    threshold: float
    weight: Optional[float] = None


class ServiceDoc(BaseModel):
    service_id: str
    current_implementation_id: str
    implementations: Dict[str, ImplementationDoc] = Field(default_factory=dict)
    dependencies: List[str] = Field(default_factory=list)
    configuration: ConfigurationDoc = Field(default_factory=ConfigurationDoc)
    specifications: Dict[QoSKind, SpecificationDoc] = Field(default_factory=dict)
    instances: List[InstanceDoc] = Field(default_factory=list)
    allow_implementation_change: bool = False

    def to_domain(self) -> Service:
        configuration = ServiceConfiguration(
            load_balancer=self.configuration.load_balancer,
            weights=dict(self.configuration.weights),
        )
        if configuration.is_weighted and not configuration.weights_are_normalised():
            log.warning("%s: load balancer weights do not sum to 1: %s", self.service_id, configuration.weights)
        return Service(
            service_id=self.service_id,
            current_implementation_id=self.current_implementation_id,
            implementations={
                impl_id: Implementation(
                    implementation_id=doc.implementation_id,
                    qos=_collection(doc.qos),
                    benchmarks=dict(doc.benchmarks),
                    vulnerability_score=doc.vulnerability_score,
                )
                for impl_id, doc in self.implementations.items()
            },
            dependencies=set(self.dependencies),
            configuration=configuration,
            specifications={
                kind: QoSSpecification(kind, doc.threshold, doc.weight)
                for kind, doc in self.specifications.items()
            },
            instances=[doc.to_domain() for doc in self.instances],
            allow_implementation_change=self.allow_implementation_change,
        )


class AdaptationOptionDoc(BaseModel):
    type: AdaptationKind
    service_id: str
    implementation_id: str
    description: str
    forced: bool = False
    qos: Optional[QoSKind] = None
    instance_id: Optional[str] = None
    instance_count: Optional[int] = None
    candidate_implementations: Optional[List[str]] = None

    @classmethod
    def from_domain(cls, option: AdaptationOption) -> AdaptationOptionDoc:
        fields = dataclasses.asdict(option)
        if "candidate_implementations" in fields:
            fields["candidate_implementations"] = list(fields["candidate_implementations"])
        return cls(type=option.kind, **fields)


class QoSUpdateDoc(BaseModel):
    service_id: str
    instance_latest: Dict[str, Dict[QoSKind, QoSValueDoc]] = Field(default_factory=dict)
    service_latest: Dict[QoSKind, QoSValueDoc] = Field(default_factory=dict)
    instance_current: Dict[str, Dict[QoSKind, QoSValueDoc]] = Field(default_factory=dict)
    service_current: Dict[QoSKind, QoSValueDoc] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, update: QoSUpdate) -> QoSUpdateDoc:
        def per_kind(values: Dict[QoSKind, QoSValue]) -> Dict[QoSKind, QoSValueDoc]:
            return {kind: QoSValueDoc.from_domain(v) for kind, v in values.items()}

        return cls(
            service_id=update.service_id,
            instance_latest={iid: per_kind(v) for iid, v in update.instance_latest.items()},
            service_latest=per_kind(update.service_latest),
            instance_current={iid: per_kind(v) for iid, v in update.instance_current.items()},
            service_current=per_kind(update.service_current),
        )


_SERVICES = TypeAdapter(Dict[str, ServiceDoc])
_SNAPSHOTS = TypeAdapter(List[MetricsSnapshotDoc])


def decode_services(payload: Any) -> Dict[str, Service]:
    try:
        docs = _SERVICES.validate_python(payload or {})
    except ValidationError as exc:
        raise InvalidPayload(f"invalid services map: {exc}") from exc
    services = {}
    for service_id, doc in docs.items():
        if doc.service_id != service_id:
            raise InvalidPayload(f"service {doc.service_id!r} listed under key {service_id!r}")
        services[service_id] = doc.to_domain()
    return services


def decode_snapshots(payload: Any) -> List[InstanceMetricsSnapshot]:
    try:
        docs = _SNAPSHOTS.validate_python(payload or [])
    except ValidationError as exc:
        raise InvalidPayload(f"invalid metrics snapshots: {exc}") from exc
    return [doc.to_domain() for doc in docs]


def encode_update(update: QoSUpdate) -> Dict[str, Any]:
    return QoSUpdateDoc.from_domain(update).model_dump(mode="json")


def encode_options(options: Dict[str, List[AdaptationOption]]) -> Dict[str, Any]:
    return {
        sid: [AdaptationOptionDoc.from_domain(o).model_dump(mode="json") for o in opts]
        for sid, opts in options.items()
    }
