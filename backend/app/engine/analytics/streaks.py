# engine/analytics/streaks.py
"""
Streaks de check-in sur dates calendaires locales.

Dates locales dédoublonnées et triées :
    longest_streak = plus longue suite de jours consécutifs
    current_streak = suite finissant aujourd'hui ou hier, comptée à rebours.
                     0 si le dernier check-in date d'avant-hier ou plus tôt.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterable, List


@dataclass
class StreakResult:
    current_streak: int
    longest_streak: int


def local_date(moment: datetime, tz: tzinfo) -> date:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def compute_streaks(dates: Iterable[date], today: date) -> StreakResult:
    days: List[date] = sorted(set(dates))
    if not days:
        return StreakResult(current_streak=0, longest_streak=0)

    longest = run = 1
    for previous, current in zip(days, days[1:]):
        if current - previous == timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    current_streak = 0
    if today - days[-1] <= timedelta(days=1):
        current_streak = 1
        for i in range(len(days) - 1, 0, -1):
            if days[i] - days[i - 1] != timedelta(days=1):
                break
            current_streak += 1

    return StreakResult(current_streak=current_streak, longest_streak=longest)
