from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel


class AnalysisParameterName(str, Enum):
    analysis_window_size = "analysis-window-size"
    metrics_window_size = "metrics-window-size"
    failure_rate_threshold = "failure-rate-threshold"
    unreachable_rate_threshold = "unreachable-rate-threshold"
    qos_satisfaction_rate = "qos-satisfaction-rate"
    max_boot_time_seconds = "max-boot-time-seconds"

    @property
    def field_name(self) -> str:
        return self.name


class ParameterUpdateRequest(BaseModel):
    value: Union[int, float]
