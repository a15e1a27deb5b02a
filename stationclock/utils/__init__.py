"""Mini README: Small dependency-free helpers used across Station Clock."""

from .clock import Clock, from_epoch_ms, system_clock, today_key

__all__ = ["Clock", "from_epoch_ms", "system_clock", "today_key"]
