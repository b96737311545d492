from vault.constants import Constants as c


class DailyLimitTracker:
    def __init__(self, ceiling: int, seconds_per_day: int = c.SECONDS_PER_DAY, now: int = 0):
        if seconds_per_day <= 0:
            raise ValueError('A day must last at least one second.')
        self.ceiling = ceiling
        self.seconds_per_day = seconds_per_day
        self.spent_today = 0
        self.last_day = self.today(now)

    def today(self, now: int) -> int:
        return now // self.seconds_per_day

    def _roll_over(self, now: int):
        today = self.today(now)
        if today > self.last_day:
            self.spent_today = 0
            self.last_day = today

    def try_spend(self, amount: int, now: int) -> bool:
        """
        Check-and-reserve in one step. Resets the spend first when a day
        boundary has been crossed since the last reset.
        """
        self._roll_over(now)
        if amount < 0:
            return False
        if self.spent_today + amount > self.ceiling:
            return False
        self.spent_today += amount
        return True

    def spent(self, now: int) -> int:
        if self.today(now) > self.last_day:
            return 0
        return self.spent_today

    def remaining(self, now: int) -> int:
        return max(self.ceiling - self.spent(now), 0)

    def set_ceiling(self, ceiling: int):
        self.ceiling = ceiling

    def reset(self):
        self.spent_today = 0
