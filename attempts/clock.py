from datetime import datetime, timedelta

from django.utils import timezone


class SystemClock:
    """Wall clock. The ledger only ever asks for "now"."""

    def now(self) -> datetime:
        return timezone.now()


class FixedClock:
    """
    Manually advanced clock for deterministic elapsed-time handling
    (tests, replaying imports).
    """

    def __init__(self, start: datetime):
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now

    def set(self, value: datetime) -> None:
        self._now = value
