import datetime
from typing import Iterable, Optional


class DayMonth:
    """Helpers for the year-less ``DD.MM`` dates used throughout the ledger.

    Dates carry no year, so ordering is only meaningful within one calendar
    year: a December entry always sorts as more recent than a January one.
    """

    @staticmethod
    def parse(date: str) -> tuple[int, int]:
        """Return ``(day, month)`` for ``date``; raises ``ValueError``."""
        parts = date.split(".")
        if len(parts) < 2:
            raise ValueError(f"invalid date: {date!r}")
        return int(parts[0]), int(parts[1])

    @classmethod
    def sort_key(cls, date: str) -> tuple[int, int]:
        """Key placing later dates first when sorted ascending.

        Unparseable dates sort after every valid one.
        """
        try:
            day, month = cls.parse(date)
        except ValueError:
            return (1, 1)
        return (-month, -day)

    @classmethod
    def sort_desc(cls, dates: Iterable[str]) -> list[str]:
        """Month descending, then day descending. Ties keep input order."""
        return sorted(dates, key=cls.sort_key)

    @classmethod
    def most_recent(cls, dates: Iterable[str]) -> Optional[str]:
        ordered = cls.sort_desc(dates)
        return ordered[0] if ordered else None

    @staticmethod
    def format(value: datetime.date) -> str:
        return value.strftime("%d.%m")

    @classmethod
    def coerce(cls, value: "str | datetime.date") -> str:
        """Return ``value`` as a zero-padded ``DD.MM`` string."""
        if isinstance(value, datetime.date):
            return cls.format(value)
        day, month = cls.parse(value)
        if not (1 <= day <= 31 and 1 <= month <= 12):
            raise ValueError(f"invalid date: {value!r}")
        return f"{day:02d}.{month:02d}"

    @classmethod
    def from_iso(cls, value: str) -> str:
        """Convert ``YYYY-MM-DD`` to ``DD.MM``."""
        return cls.format(datetime.date.fromisoformat(value))
