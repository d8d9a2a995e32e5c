"""
Shared dependencies for API route modules: the process-wide provider and Analyse service.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Optional

from datasources.data_config import DataSourceSettings
from datasources.provider import DataSourceProvider
from services.analyse_service import AnalyseService

_provider: Optional[DataSourceProvider] = None
_service: Optional[AnalyseService] = None


def get_provider() -> DataSourceProvider:
    global _provider
    if _provider is None:
        _provider = DataSourceProvider(settings=DataSourceSettings())
    return _provider


def get_service() -> AnalyseService:
    global _service
    if _service is None:
        provider = get_provider()
        _service = AnalyseService(knowledge=provider.knowledge, plan=provider.plan)
    return _service


async def close_providers() -> None:
    global _provider, _service
    provider = _provider
    _provider = None
    _service = None
    if provider is not None:
        await provider.aclose()
