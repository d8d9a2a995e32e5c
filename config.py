"""
Constants and configuration for the Analyse engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os

from pydantic_settings import BaseSettings


MODULE_NAME = "ANALYSE"

ANALYSE_KNOWLEDGE_URL = os.getenv("ANALYSE_KNOWLEDGE_URL", "http://knowledge:58005").rstrip("/")
ANALYSE_PLAN_URL = os.getenv("ANALYSE_PLAN_URL", "http://plan:58003").rstrip("/")
ANALYSE_CONNECTOR_TIMEOUT = int(os.getenv("ANALYSE_CONNECTOR_TIMEOUT", "30"))

# loop parameters, overridable at runtime through the REST surface
ANALYSIS_WINDOW_SIZE: int = int(os.getenv("ANALYSIS_WINDOW_SIZE", "5"))
METRICS_WINDOW_SIZE: int = int(os.getenv("METRICS_WINDOW_SIZE", "3"))
FAILURE_RATE_THRESHOLD: float = float(os.getenv("FAILURE_RATE_THRESHOLD", "0.3"))
UNREACHABLE_RATE_THRESHOLD: float = float(os.getenv("UNREACHABLE_RATE_THRESHOLD", "0.3"))
QOS_SATISFACTION_RATE: float = float(os.getenv("QOS_SATISFACTION_RATE", "0.8"))
MAX_BOOT_TIME_SECONDS: int = int(os.getenv("MAX_BOOT_TIME_SECONDS", "120"))

# tolerance used when checking that load balancer weights sum to one
WEIGHTS_SUM_TOLERANCE = 1e-6


class Settings(BaseSettings):
    knowledge_url: str = ANALYSE_KNOWLEDGE_URL
    plan_url: str = ANALYSE_PLAN_URL
    connector_timeout: int = ANALYSE_CONNECTOR_TIMEOUT

    # transport retry for idempotent Knowledge reads
    retry_attempts: int = 3
    retry_delay: float = 0.5
    retry_backoff: float = 2.0

    analysis_window_size: int = ANALYSIS_WINDOW_SIZE
    metrics_window_size: int = METRICS_WINDOW_SIZE
    failure_rate_threshold: float = FAILURE_RATE_THRESHOLD
    unreachable_rate_threshold: float = UNREACHABLE_RATE_THRESHOLD
    qos_satisfaction_rate: float = QOS_SATISFACTION_RATE
    max_boot_time_seconds: int = MAX_BOOT_TIME_SECONDS

    host: str = "0.0.0.0"
    port: int = 58002
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "ANALYSE_",
        "extra": "ignore",
    }


settings = Settings()
