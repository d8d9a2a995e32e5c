from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from engine.architecture.model import Instance
from engine.enums import QoSKind


@dataclass(frozen=True)
class InstanceStats:
    instance: Instance
    average_response_time: Optional[float]
    availability: Optional[float]
    vulnerability_score: float
    from_new_data: bool

    @classmethod
    def from_window(cls, instance: Instance, average_response_time: float, availability: float) -> InstanceStats:
        return cls(
            instance=instance,
            average_response_time=average_response_time,
            availability=availability,
            vulnerability_score=instance.vulnerability_score,
            from_new_data=True,
        )

    @classmethod
    def carried_over(cls, instance: Instance) -> InstanceStats:
        """Stats for an instance without a usable metrics window: reuse its latest readings."""
        art = instance.latest_value(QoSKind.average_response_time)
        avail = instance.latest_value(QoSKind.availability)
        return cls(
            instance=instance,
            average_response_time=art.value if art else None,
            availability=avail.value if avail else None,
            vulnerability_score=instance.vulnerability_score,
            from_new_data=False,
        )

    def value(self, kind: QoSKind) -> Optional[float]:
        if kind is QoSKind.availability:
            return self.availability
        if kind is QoSKind.average_response_time:
            return self.average_response_time
        return self.vulnerability_score
