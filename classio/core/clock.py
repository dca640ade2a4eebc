# classio/core/clock.py
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo: так даты хранятся в БД."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def today() -> date:
    # Расписание и "уроки на сегодня" считаются по локальной дате сервера
    return date.today()
