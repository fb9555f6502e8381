import re
from datetime import datetime, timezone
from typing import Iterator

from src.subtrack.domain.errors import SubscriptionError

_MONTH_RE = re.compile(r"([0-9]{2})-([0-9]{4})")


def parse_month(text: str) -> datetime:
    """
    "MM-YYYY" -> первое число месяца, 00:00 UTC.
    Любой другой вид строки (в т.ч. "7-2025", "2025-07", "13-2025") отклоняется.
    """
    m = _MONTH_RE.fullmatch(text or "")
    if not m or not 1 <= int(m.group(1)) <= 12 or int(m.group(2)) < 1:
        raise SubscriptionError.invalid_argument(
            f"invalid month format, expected MM-YYYY: {text}"
        )
    return datetime(int(m.group(2)), int(m.group(1)), 1, tzinfo=timezone.utc)


def format_month(month: datetime | None) -> str:
    if month is None:
        return ""
    return f"{month.month:02d}-{month.year:04d}"


def month_floor(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return datetime(dt.year, dt.month, 1, tzinfo=timezone.utc)


def month_index(month: datetime) -> int:
    return month.year * 12 + (month.month - 1)


def month_from_index(idx: int) -> datetime:
    return datetime(idx // 12, idx % 12 + 1, 1, tzinfo=timezone.utc)


def add_months(month: datetime, n: int) -> datetime:
    return month_from_index(month_index(month) + n)


def iter_months(start: datetime, end: datetime) -> Iterator[datetime]:
    """
    Все месяцы диапазона [start, end] включительно, шаг один календарный месяц.
    """
    # Курсор по целому индексу: datetime строится только для месяцев внутри диапазона
    first, last = month_index(month_floor(start)), month_index(month_floor(end))
    for idx in range(first, last + 1):
        yield month_from_index(idx)
