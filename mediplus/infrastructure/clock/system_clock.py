from datetime import datetime

from ...application.ports.clock import Clock


class SystemClock(Clock):
    """Clinic-local wall clock; the clinic runs in a single timezone."""

    def now(self) -> datetime:
        return datetime.now()
