"""
Entry point for the Analyse module API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from api.routes import router
from api.routes.common import close_providers, get_service
from config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    service = get_service()
    log.info(
        "Analyse module ready (knowledge=%s, plan=%s)",
        settings.knowledge_url,
        settings.plan_url,
    )
    log.debug("Initial analysis parameters: %s", service.parameters.active.model_dump())
    try:
        yield
    finally:
        await service.shutdown()
        await close_providers()


app = FastAPI(
    title="Analyse Module",
    description="Analyse stage of the self-adaptation loop: QoS evaluation and adaptation options.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
