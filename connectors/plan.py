# connectors/plan.py

from __future__ import annotations

from typing import Dict, Optional

import httpx

from datasources.base import PlanConnector
from datasources.helpers import request_json


class HttpPlanConnector(PlanConnector):
    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(base_url, timeout=timeout, headers=headers)
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def start(self) -> None:
        # the response body carries nothing the loop needs
        await request_json(
            self._client, "GET", f"{self.base_url}/rest/start", headers=self._headers(), service_name="Plan"
        )

    async def aclose(self) -> None:
        await self._client.aclose()
