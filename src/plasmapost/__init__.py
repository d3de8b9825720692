"""Plasma cutting post-processor: CAM toolpath events to NC programs."""

__version__ = "0.1.0"
