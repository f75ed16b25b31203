"""
Utility modules for the rollback engine.
"""

from .clock import AsyncioClock, Clock, VirtualClock

__all__ = ["AsyncioClock", "Clock", "VirtualClock"]
