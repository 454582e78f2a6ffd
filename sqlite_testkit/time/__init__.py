"""Time utilities: injectable clocks and timeout checks."""

from .clock import Clock, ManualClock, SystemClock, is_timed_out

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "is_timed_out",
]
