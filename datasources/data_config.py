"""
Connection settings for the Knowledge and Plan collaborators

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    ANALYSE_KNOWLEDGE_URL,
    ANALYSE_PLAN_URL,
    ANALYSE_CONNECTOR_TIMEOUT,
)

class DataSourceSettings(BaseSettings):
    knowledge_url: str = ANALYSE_KNOWLEDGE_URL
    plan_url: str = ANALYSE_PLAN_URL
    connector_timeout: int = ANALYSE_CONNECTOR_TIMEOUT

    @field_validator("knowledge_url", "plan_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        value = str(v or "").strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Unsupported collaborator URL: {value!r}")
        return value.rstrip("/")

    @field_validator("connector_timeout")
    @classmethod
    def positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("connector_timeout must be positive")
        return v

    model_config = {"env_prefix": "ANALYSE_", "extra": "ignore"}
