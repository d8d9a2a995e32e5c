"""
QoS package exports.

Specifications decide whether a single value or a window of values meets a
threshold; histories keep the latest and current values per entity.
"""

from engine.qos.history import QoSCollection, QoSHistory, QoSValue
from engine.qos.specification import QoSSpecification

__all__ = ["QoSCollection", "QoSHistory", "QoSValue", "QoSSpecification"]
