"""
State private to one Analyse iteration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Set

from engine.architecture.model import Service
from engine.options import AdaptationOption
from engine.parameters import AnalysisParameters


@dataclass
class IterationContext:
    services: Dict[str, Service]
    params: AnalysisParameters
    now: datetime
    # services in a transitional or failure state: only forced options allowed
    to_skip: Set[str] = field(default_factory=set)
    forced: Dict[str, List[AdaptationOption]] = field(default_factory=dict)
    proposed: Dict[str, List[AdaptationOption]] = field(default_factory=dict)

    def force(self, option: AdaptationOption) -> None:
        self.forced.setdefault(option.service_id, []).append(option)

    def skip(self, service_id: str) -> None:
        self.to_skip.add(service_id)

    def has_forced_options(self, service_id: str) -> bool:
        return bool(self.forced.get(service_id))

    def merged_options(self) -> Dict[str, List[AdaptationOption]]:
        """Proposed options followed by forced ones, per service; services with neither are omitted."""
        merged: Dict[str, List[AdaptationOption]] = {
            sid: list(opts) for sid, opts in self.proposed.items() if opts
        }
        for sid, opts in self.forced.items():
            if opts:
                merged.setdefault(sid, []).extend(opts)
        return merged
