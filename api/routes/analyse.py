"""
Analyse routes: trigger an iteration and inspect or stage the analysis parameters.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from api.requests import AnalysisParameterName, ParameterUpdateRequest
from api.responses import ConfigurationResponse, StartResponse
from api.routes.common import get_service
from api.routes.exception import handle_exceptions

log = logging.getLogger(__name__)

router = APIRouter(prefix="/rest", tags=["Analyse"])


@router.get("/start", response_model=StartResponse, status_code=status.HTTP_202_ACCEPTED)
@handle_exceptions
async def start() -> StartResponse:
    scheduled = await get_service().schedule()
    return StartResponse(status="scheduled" if scheduled else "running")


@router.get("/configuration", response_model=ConfigurationResponse)
@handle_exceptions
async def configuration() -> ConfigurationResponse:
    return ConfigurationResponse.model_validate(get_service().configuration())


@router.put("/configuration/{parameter}", response_model=ConfigurationResponse)
@handle_exceptions
async def update_parameter(parameter: AnalysisParameterName, req: ParameterUpdateRequest) -> ConfigurationResponse:
    service = get_service()
    service.stage_parameter(parameter.field_name, req.value)
    log.info("Staged %s=%s for the next iteration", parameter.value, req.value)
    return ConfigurationResponse.model_validate(service.configuration())
