"""
Tests for analysis parameter validation and staged runtime updates.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from types import SimpleNamespace

import pytest

from conftest import DEFAULTS, make_params
from engine.exceptions import ConfigurationError
from engine.parameters import AnalysisParameters, ParameterStore


@pytest.mark.parametrize(
    "overrides",
    [
        {"analysis_window_size": 0},
        {"metrics_window_size": 1},
        {"failure_rate_threshold": 1.5},
        {"qos_satisfaction_rate": -0.1},
        {"max_boot_time_seconds": 0},
        {"failure_rate_threshold": 0.6, "unreachable_rate_threshold": 0.4},
    ],
)
def test_invalid_parameters_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        AnalysisParameters.create(**{**DEFAULTS, **overrides})


def test_unknown_parameter_is_rejected():
    with pytest.raises(ConfigurationError):
        AnalysisParameters.create(**DEFAULTS, window=3)


def test_from_settings_reads_every_field():
    cfg = SimpleNamespace(**{**DEFAULTS, "analysis_window_size": 7, "port": 1})
    assert AnalysisParameters.from_settings(cfg).analysis_window_size == 7


def test_staged_value_is_applied_on_next_iteration():
    store = ParameterStore(make_params())
    store.stage("analysis_window_size", 10)

    assert store.active.analysis_window_size == 5
    assert store.staged == {"analysis_window_size": 10}

    applied = store.apply()

    assert applied.analysis_window_size == 10
    assert store.active is applied
    assert store.staged == {}


def test_rejected_value_leaves_configuration_untouched():
    store = ParameterStore(make_params())
    store.stage("failure_rate_threshold", 0.6)

    with pytest.raises(ConfigurationError):
        store.stage("unreachable_rate_threshold", 0.5)

    assert store.staged == {"failure_rate_threshold": 0.6}
    assert store.active.unreachable_rate_threshold == 0.3


def test_stage_unknown_name():
    store = ParameterStore(make_params())
    with pytest.raises(ConfigurationError):
        store.stage("nope", 1)


def test_apply_without_changes_keeps_active():
    params = make_params()
    store = ParameterStore(params)
    assert store.apply() is params
