"""
Wall-clock aligned cadence.

Equivalent to the cron expression `*/N * * * *`: fire times fall on minute
boundaries that are multiples of N within the hour (N must divide 60).
"""

from datetime import datetime, timedelta


class CadenceSchedule:
    """
    Computes fire times aligned to every `interval_minutes` minutes.

    Example:
        >>> schedule = CadenceSchedule(5)
        >>> schedule.next_fire_time(datetime(2025, 1, 26, 12, 3, 10))
        datetime.datetime(2025, 1, 26, 12, 5)
        >>> schedule.expression
        '*/5 * * * *'
    """

    def __init__(self, interval_minutes: int = 5) -> None:
        if interval_minutes < 1 or 60 % interval_minutes != 0:
            raise ValueError(
                f"interval_minutes must be a divisor of 60, got {interval_minutes}"
            )
        self.interval_minutes = interval_minutes

    @property
    def expression(self) -> str:
        """Cron expression for this cadence."""
        return f"*/{self.interval_minutes} * * * *"

    def next_fire_time(self, now: datetime) -> datetime:
        """
        Get the first boundary strictly after `now`.

        A `now` that sits exactly on a boundary returns the following one, so
        a tick that just ran on a boundary never fires twice.
        """
        hour_start = now.replace(minute=0, second=0, microsecond=0)
        elapsed = now - hour_start
        step = timedelta(minutes=self.interval_minutes)
        slots = elapsed // step + 1
        return hour_start + slots * step

    def seconds_until_next(self, now: datetime) -> float:
        """Seconds from `now` until the next fire time."""
        return (self.next_fire_time(now) - now).total_seconds()
