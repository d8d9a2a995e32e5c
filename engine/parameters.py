"""
Analysis parameters and their staged runtime updates.

Parameters are validated whenever they are built or changed. Changes requested
while the loop is running are staged and only become active when the next
iteration starts, so that a single iteration always sees one consistent set.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import BaseModel, Field, ValidationError, model_validator

from engine.exceptions import ConfigurationError

log = logging.getLogger(__name__)


class AnalysisParameters(BaseModel):
    # number of latest QoS values averaged into a current value
    analysis_window_size: int = Field(ge=1)
    # number of metrics snapshots analysed per instance and iteration
    metrics_window_size: int = Field(ge=2)
    failure_rate_threshold: float = Field(ge=0.0, le=1.0)
    unreachable_rate_threshold: float = Field(ge=0.0, le=1.0)
    qos_satisfaction_rate: float = Field(ge=0.0, le=1.0)
    max_boot_time_seconds: int = Field(ge=1)

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def _check_rate_thresholds(self) -> AnalysisParameters:
        if self.failure_rate_threshold + self.unreachable_rate_threshold >= 1:
            raise ValueError(
                "failure_rate_threshold + unreachable_rate_threshold must be less than 1"
            )
        return self

    @classmethod
    def create(cls, **values: Any) -> AnalysisParameters:
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def from_settings(cls, cfg: Any) -> AnalysisParameters:
        return cls.create(**{name: getattr(cfg, name) for name in cls.model_fields})


class ParameterStore:
    def __init__(self, params: AnalysisParameters) -> None:
        self._active = params
        self._staged: Dict[str, Any] = {}

    @property
    def active(self) -> AnalysisParameters:
        return self._active

    @property
    def staged(self) -> Dict[str, Any]:
        return dict(self._staged)

    def stage(self, name: str, value: Any) -> None:
        """Stage a new value, validating it against the active and already staged values.

        Raises :class:`ConfigurationError` and leaves both the active and the staged
        configuration untouched when the value is rejected.
        """
        if name not in AnalysisParameters.model_fields:
            raise ConfigurationError(f"Unknown analysis parameter: {name!r}")
        candidate = {**self._active.model_dump(), **self._staged, name: value}
        validated = AnalysisParameters.create(**candidate)
        self._staged[name] = getattr(validated, name)
        log.debug("Staged %s=%s for the next iteration", name, self._staged[name])

    def apply(self) -> AnalysisParameters:
        if not self._staged:
            return self._active
        updated = AnalysisParameters.create(**{**self._active.model_dump(), **self._staged})
        for name, value in self._staged.items():
            log.info("%s updated to %s", name, value)
        self._active = updated
        self._staged = {}
        return self._active
