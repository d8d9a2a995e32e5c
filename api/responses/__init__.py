"""
Response models for the Analyse REST endpoints.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class AnalysisParametersView(BaseModel):
    analysis_window_size: int
    metrics_window_size: int
    failure_rate_threshold: float
    unreachable_rate_threshold: float
    qos_satisfaction_rate: float
    max_boot_time_seconds: int


class ConfigurationResponse(BaseModel):
    active: AnalysisParametersView
    # values applied when the next iteration starts
    staged: Dict[str, Any] = Field(default_factory=dict)


class StartResponse(BaseModel):
    status: str = "scheduled"
