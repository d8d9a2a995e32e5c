"""
Tests for the HTTP Knowledge and Plan connectors using httpx mock transports.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import json

import httpx
import pytest

from config import settings
from connectors.knowledge import HttpKnowledgeConnector
from connectors.plan import HttpPlanConnector
from datasources.exceptions import DataSourceUnavailable, InvalidQuery
from engine.enums import QoSKind
from engine.options import AddInstanceOption


def _connector(handler, base_url="http://knowledge:58005/"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpKnowledgeConnector(base_url, client=client)


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(settings, "retry_delay", 0.0)
    monkeypatch.setattr(settings, "retry_attempts", 3)


@pytest.mark.asyncio
async def test_get_latest_n_metrics_sends_query_params():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[
            {"service_id": "orders", "instance_id": "v1@x", "timestamp": "2026-03-01T12:00:00Z", "status": "FAILED"}
        ])

    connector = _connector(handler)
    [snap] = await connector.get_latest_n_metrics("orders", "v1@x", 3)
    await connector.aclose()

    assert snap.failed
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/metrics/getLatestN"
    assert request.url.params["serviceId"] == "orders"
    assert request.url.params["instanceId"] == "v1@x"
    assert request.url.params["n"] == "3"
    assert request.headers["accept"] == "application/json"


@pytest.mark.asyncio
async def test_empty_services_map():
    connector = _connector(lambda request: httpx.Response(200, json={}))
    assert await connector.get_services_map() == {}
    await connector.aclose()


@pytest.mark.asyncio
async def test_module_notifications():
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200)

    connector = _connector(handler)
    await connector.notify_module_start("ANALYSE")
    await connector.set_failed_module("ANALYSE")
    await connector.aclose()

    assert seen == [
        ("PUT", "/rest/notifyModuleStart", {"module": "ANALYSE"}),
        ("PUT", "/rest/failedModule", {"module": "ANALYSE"}),
    ]


@pytest.mark.asyncio
async def test_propose_adaptation_options_posts_encoded_options():
    bodies = []

    def handler(request):
        bodies.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200)

    connector = _connector(handler)
    option = AddInstanceOption(service_id="orders", implementation_id="v1", description="add", qos=QoSKind.availability)
    await connector.propose_adaptation_options({"orders": [option]})
    await connector.aclose()

    path, body = bodies[0]
    assert path == "/rest/proposeAdaptationOptions"
    assert body["orders"][0]["type"] == "add_instance"


@pytest.mark.asyncio
async def test_http_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500, text="boom")

    connector = _connector(handler)
    with pytest.raises(InvalidQuery, match="500"):
        await connector.get_services_map()
    await connector.aclose()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_unreachable_store_is_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    connector = _connector(handler)
    with pytest.raises(DataSourceUnavailable):
        await connector.get_services_map()
    await connector.aclose()
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_writes_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    connector = _connector(handler)
    with pytest.raises(DataSourceUnavailable):
        await connector.notify_module_start("ANALYSE")
    await connector.aclose()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_plan_start():
    seen = []

    def handler(request):
        seen.append((request.method, str(request.url)))
        return httpx.Response(200, text="")

    plan = HttpPlanConnector(
        "http://plan:58003", client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
    await plan.start()
    await plan.aclose()

    assert seen == [("GET", "http://plan:58003/rest/start")]
