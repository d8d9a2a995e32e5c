"""
QoS values and histories. A history is the append-only sequence of latest values of one QoS
kind for one entity, plus a current value that is replaced whenever it is recomputed.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from engine.enums import QoSKind


@dataclass(frozen=True)
class QoSValue:
    value: float
    timestamp: datetime
    invalid: bool = False


@dataclass
class QoSHistory:
    values: List[QoSValue] = field(default_factory=list)
    current: Optional[QoSValue] = None

    @property
    def latest(self) -> Optional[QoSValue]:
        return self.values[-1] if self.values else None

    def append(self, value: float, timestamp: datetime) -> QoSValue:
        entry = QoSValue(float(value), timestamp)
        self.values.append(entry)
        return entry

    def replace_current(self, value: float, timestamp: datetime) -> QoSValue:
        self.current = QoSValue(float(value), timestamp)
        return self.current

    def latest_window(self, n: int, allow_partial: bool = False) -> Optional[List[float]]:
        """Return the newest ``n`` valid values, oldest first.

        The walk stops at the first invalid entry. Without ``allow_partial`` a window
        shorter than ``n`` is reported as ``None``.
        """
        window: List[float] = []
        for entry in reversed(self.values):
            if len(window) == n or entry.invalid:
                break
            window.append(entry.value)
        if len(window) < n and not allow_partial:
            return None
        window.reverse()
        return window

    def invalidate(self) -> None:
        self.values = [dataclasses.replace(v, invalid=True) for v in self.values]


@dataclass
class QoSCollection:
    histories: Dict[QoSKind, QoSHistory] = field(default_factory=dict)

    def history(self, kind: QoSKind) -> QoSHistory:
        if kind not in self.histories:
            self.histories[kind] = QoSHistory()
        return self.histories[kind]

    def current_value(self, kind: QoSKind) -> Optional[QoSValue]:
        return self.history(kind).current

    def latest_value(self, kind: QoSKind) -> Optional[QoSValue]:
        hist = self.history(kind)
        return hist.latest or hist.current

    def latest_window(self, kind: QoSKind, n: int, allow_partial: bool = False) -> Optional[List[float]]:
        return self.history(kind).latest_window(n, allow_partial=allow_partial)

    def append(self, kind: QoSKind, value: float, timestamp: datetime) -> QoSValue:
        return self.history(kind).append(value, timestamp)

    def replace_current(self, kind: QoSKind, value: float, timestamp: datetime) -> QoSValue:
        return self.history(kind).replace_current(value, timestamp)

    def invalidate(self, kind: QoSKind) -> None:
        self.history(kind).invalidate()
