"""
Test Suite for API Routes - Analyse

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio

import pytest
from fastapi import HTTPException

from api.requests import AnalysisParameterName, ParameterUpdateRequest
from api.routes import analyse as analyse_route
from api.routes import health as health_route
from conftest import FakeKnowledge, FakePlan, make_params
from datasources.data_config import DataSourceSettings
from services.analyse_service import AnalyseService


@pytest.fixture
def service(monkeypatch):
    svc = AnalyseService(FakeKnowledge(), FakePlan(), params=make_params())
    monkeypatch.setattr(analyse_route, "get_service", lambda: svc)
    return svc


@pytest.mark.asyncio
async def test_start_schedules_an_iteration(service):
    resp = await analyse_route.start()

    assert resp.status == "scheduled"
    await service.wait()
    assert service.plan.started == 1
    assert service.last_result is not None


@pytest.mark.asyncio
async def test_start_while_running_is_ignored(service):
    gate = asyncio.Event()

    async def blocked(now=None):
        await gate.wait()

    service.start_analysis = blocked

    first = await analyse_route.start()
    second = await analyse_route.start()
    gate.set()
    await service.wait()

    assert first.status == "scheduled"
    assert second.status == "running"
    assert not service.running


@pytest.mark.asyncio
async def test_get_configuration(service):
    resp = await analyse_route.configuration()
    assert resp.active.analysis_window_size == 5
    assert resp.staged == {}


@pytest.mark.asyncio
async def test_update_parameter_is_staged(service):
    resp = await analyse_route.update_parameter(
        AnalysisParameterName.qos_satisfaction_rate, ParameterUpdateRequest(value=0.9)
    )

    assert resp.staged == {"qos_satisfaction_rate": 0.9}
    assert resp.active.qos_satisfaction_rate == 0.8


@pytest.mark.asyncio
async def test_invalid_parameter_returns_400(service):
    with pytest.raises(HTTPException) as exc:
        await analyse_route.update_parameter(
            AnalysisParameterName.metrics_window_size, ParameterUpdateRequest(value=1)
        )
    assert exc.value.status_code == 400
    assert service.parameters.staged == {}


@pytest.mark.asyncio
async def test_unexpected_errors_return_500(monkeypatch):
    def broken():
        raise RuntimeError("no provider")

    monkeypatch.setattr(analyse_route, "get_service", broken)
    with pytest.raises(HTTPException) as exc:
        await analyse_route.configuration()
    assert exc.value.status_code == 500


def test_parameter_names_map_to_fields():
    assert AnalysisParameterName("max-boot-time-seconds").field_name == "max_boot_time_seconds"
    assert {p.field_name for p in AnalysisParameterName} == set(make_params().model_dump())


@pytest.mark.asyncio
async def test_health(monkeypatch):
    class DummyProvider:
        settings = DataSourceSettings(knowledge_url="http://k:1", plan_url="http://p:2")

    monkeypatch.setattr(health_route, "get_provider", lambda: DummyProvider())
    assert await health_route.health() == {"status": "ok", "knowledge": "http://k:1", "plan": "http://p:2"}
