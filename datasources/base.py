"""
Base connectors for the MAPE-K collaborators of the Analyse stage

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from engine.architecture.model import Service
    from engine.metrics.snapshot import InstanceMetricsSnapshot
    from engine.options import AdaptationOption
    from engine.updater import QoSUpdate


class BaseConnector(ABC):
    def __init__(self, base_url: str, timeout: int = 30, headers: Optional[Dict[str, str]] = None):
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}

    def _headers(self) -> Dict[str, str]:
        """Basic header set applied to every outbound request."""
        return {**self.headers, "Accept": "application/json"}

    async def aclose(self) -> None:
        return None


class KnowledgeConnector(BaseConnector):
    @abstractmethod
    async def get_services_map(self) -> Dict[str, "Service"]: ...

    @abstractmethod
    async def get_latest_n_metrics(
        self,
        service_id: str,
        instance_id: str,
        n: int,
    ) -> List["InstanceMetricsSnapshot"]: ...

    @abstractmethod
    async def update_service_qos_collection(self, update: "QoSUpdate") -> None: ...

    @abstractmethod
    async def propose_adaptation_options(self, options: Dict[str, List["AdaptationOption"]]) -> None: ...

    @abstractmethod
    async def notify_module_start(self, module: str) -> None: ...

    @abstractmethod
    async def set_failed_module(self, module: str) -> None: ...


class PlanConnector(BaseConnector):
    @abstractmethod
    async def start(self) -> None: ...
