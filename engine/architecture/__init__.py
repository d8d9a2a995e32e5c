"""
Architecture package exports.
"""

from engine.architecture.model import Implementation, Instance, Service, ServiceConfiguration

__all__ = ["Implementation", "Instance", "Service", "ServiceConfiguration"]
