"""Kernel time – event clock and timestamp rendering."""
from es_commerce.kernel.time.clock import Clock, FrozenClock, SystemClock, to_iso, utc_now

__all__ = ["Clock", "FrozenClock", "SystemClock", "to_iso", "utc_now"]
