"""
Provider bundling the connectors the Analyse loop talks to.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import Optional

from .base import KnowledgeConnector, PlanConnector
from .data_config import DataSourceSettings
from .factory import DataSourceFactory


class DataSourceProvider:
    def __init__(
        self,
        settings: DataSourceSettings,
        knowledge: Optional[KnowledgeConnector] = None,
        plan: Optional[PlanConnector] = None,
    ):
        self.settings = settings
        self.knowledge = knowledge or DataSourceFactory.create_knowledge(settings)
        self.plan = plan or DataSourceFactory.create_plan(settings)

    async def aclose(self) -> None:
        await self.knowledge.aclose()
        await self.plan.aclose()
