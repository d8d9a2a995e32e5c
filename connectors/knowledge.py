# connectors/knowledge.py

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import httpx

from datasources.base import KnowledgeConnector
from datasources.codec import decode_services, decode_snapshots, encode_options, encode_update
from datasources.helpers import request_json
from datasources.retry import retry
from engine.architecture.model import Service
from engine.metrics.snapshot import InstanceMetricsSnapshot
from engine.options import AdaptationOption
from engine.updater import QoSUpdate

log = logging.getLogger(__name__)


class HttpKnowledgeConnector(KnowledgeConnector):
    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(base_url, timeout=timeout, headers=headers)
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/rest{path}"

    async def _send(self, method: str, path: str, **kwargs) -> object:
        return await request_json(
            self._client, method, self._url(path), headers=self._headers(), service_name="Knowledge", **kwargs
        )

    @retry()
    async def get_services_map(self) -> Dict[str, Service]:
        return decode_services(await self._send("GET", "/services"))

    @retry()
    async def get_latest_n_metrics(self, service_id: str, instance_id: str, n: int) -> List[InstanceMetricsSnapshot]:
        payload = await self._send(
            "GET",
            "/metrics/getLatestN",
            params={"serviceId": service_id, "instanceId": instance_id, "n": n},
        )
        return decode_snapshots(payload)

    async def update_service_qos_collection(self, update: QoSUpdate) -> None:
        await self._send("POST", "/service/update-qos-collection", json=encode_update(update))

    async def propose_adaptation_options(self, options: Dict[str, List[AdaptationOption]]) -> None:
        log.debug("Proposing adaptation options for %d service(s)", len(options))
        await self._send("POST", "/proposeAdaptationOptions", json=encode_options(options))

    async def notify_module_start(self, module: str) -> None:
        await self._send("PUT", "/notifyModuleStart", json={"module": module})

    async def set_failed_module(self, module: str) -> None:
        await self._send("PUT", "/failedModule", json={"module": module})

    async def aclose(self) -> None:
        await self._client.aclose()
