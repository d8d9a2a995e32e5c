"""
Factory for creating the Knowledge and Plan connectors based on configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from connectors.knowledge import HttpKnowledgeConnector
from connectors.plan import HttpPlanConnector


class DataSourceFactory:

    @staticmethod
    def create_knowledge(config):
        return HttpKnowledgeConnector(config.knowledge_url, timeout=config.connector_timeout)

    @staticmethod
    def create_plan(config):
        return HttpPlanConnector(config.plan_url, timeout=config.connector_timeout)
