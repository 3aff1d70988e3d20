"""Calculation history records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List

import locales


@dataclass(frozen=True)
class HistoryEntry:
    """A single stored calculation. `timestamp` is the instant it was recorded."""
    id: int
    expression: str
    result: str
    timestamp: datetime
    memo: str = ""

    @property
    def local_timestamp(self) -> datetime:
        return self.timestamp.astimezone()

    @property
    def local_date(self) -> date:
        return self.local_timestamp.date()

    @property
    def description(self) -> str:
        return f"{self.expression} = {self.result}"

    @property
    def formatted_time(self) -> str:
        return self.local_timestamp.strftime("%H:%M:%S")

    @property
    def formatted_datetime(self) -> str:
        return self.local_timestamp.strftime("%Y-%m-%d %H:%M:%S")

    def full_description(self, tr=None) -> str:
        """Clipboard text: calculation, time, and the memo if there is one."""
        tr = tr or locales.get_translator("en")
        text = f"{self.description} ({self.formatted_datetime})"
        if self.memo:
            text += "\n" + tr("Memo: {}").format(self.memo)
        return text


@dataclass(frozen=True)
class HistoryGroup:
    """Entries that share a local calendar day, newest first."""
    date: date
    entries: List[HistoryEntry] = field(default_factory=list)

    def formatted_date(self, language: str = "en") -> str:
        return locales.format_long_date(self.date, language)

    def __len__(self) -> int:
        return len(self.entries)
