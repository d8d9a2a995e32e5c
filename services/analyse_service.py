"""
Analyse service: runs one loop iteration against Knowledge and hands over to Plan.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from config import MODULE_NAME, settings
from datasources.base import KnowledgeConnector, PlanConnector
from datasources.exceptions import DataSourceError
from engine.analyser import IterationResult, run
from engine.exceptions import ModuleExecutionError
from engine.parameters import AnalysisParameters, ParameterStore

log = logging.getLogger(__name__)


class AnalyseService:
    def __init__(
        self,
        knowledge: KnowledgeConnector,
        plan: PlanConnector,
        params: Optional[AnalysisParameters] = None,
    ) -> None:
        self.knowledge = knowledge
        self.plan = plan
        self.parameters = ParameterStore(params or AnalysisParameters.from_settings(settings))
        self.last_result: Optional[IterationResult] = None
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    def configuration(self) -> Dict[str, Any]:
        return {"active": self.parameters.active.model_dump(), "staged": self.parameters.staged}

    def stage_parameter(self, name: str, value: Any) -> None:
        self.parameters.stage(name, value)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def schedule(self) -> bool:
        """Start an iteration in the background; False when one is still running."""
        async with self._lock:
            if self.running:
                log.warning("Analyse iteration already running, ignoring start request")
                return False
            self._task = asyncio.create_task(self._run_scheduled())
            return True

    async def _run_scheduled(self) -> None:
        try:
            await self.start_analysis()
        except ModuleExecutionError as exc:
            # already reported to Knowledge as a failed module
            log.error("Analyse iteration aborted: %s", exc)

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def shutdown(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def start_analysis(self, now: Optional[datetime] = None) -> IterationResult:
        """Run one iteration. Any failure is reported to Knowledge and Plan is not signalled."""
        try:
            log.info("Starting Analyse routine")
            await self.knowledge.notify_module_start(MODULE_NAME)
            params = self.parameters.apply()
            result = await run(self.knowledge, params, now=now)
            await self.knowledge.propose_adaptation_options(result.options)
            log.info(
                "Ending Analyse routine (%d service(s) with options). Notifying the Plan to start.",
                len(result.options),
            )
            await self.plan.start()
        except Exception as exc:
            log.exception("Error during the Analyse execution")
            try:
                await self.knowledge.set_failed_module(MODULE_NAME)
            except DataSourceError as report_exc:
                log.error("Could not report the Analyse failure to Knowledge: %s", report_exc)
            raise ModuleExecutionError(f"Error during the Analyse execution: {exc}") from exc
        self.last_result = result
        return result
