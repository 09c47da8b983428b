# Cadence
# Copyright (C) 2026 Cadence contributors
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; version 3
# of the License or (at your option) any later version of
# the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston,
# MA  02110-1301, USA.

"""Bulk duration options and the date ranges they cover."""

from datetime import datetime, time
from enum import Enum
from typing import NamedTuple, Optional, Union

from dateutil.relativedelta import relativedelta

from .occurrences import END_OF_DAY


class UnknownDurationOption(ValueError):
    def __init__(self, option) -> None:
        super().__init__(f"Duration option {option!r} is not supported")
        self.option = option


class DurationOption(str, Enum):
    """Symbolic duration choices for bulk session creation."""

    NEXT_1_SESSION = "next_1_session"
    NEXT_2_SESSIONS = "next_2_sessions"
    NEXT_3_SESSIONS = "next_3_sessions"
    NEXT_4_SESSIONS = "next_4_sessions"
    NEXT_5_SESSIONS = "next_5_sessions"
    NEXT_6_SESSIONS = "next_6_sessions"
    NEXT_7_SESSIONS = "next_7_sessions"
    NEXT_8_SESSIONS = "next_8_sessions"
    CURRENT_MONTH = "current_month"
    NEXT_2_MONTHS = "next_2_months"
    NEXT_3_MONTHS = "next_3_months"
    NEXT_4_MONTHS = "next_4_months"
    NEXT_5_MONTHS = "next_5_months"
    NEXT_6_MONTHS = "next_6_months"
    CUSTOM_RANGE = "custom_range"

    @classmethod
    def parse(cls, option: Union["DurationOption", str]) -> "DurationOption":
        try:
            return cls(option)
        except ValueError:
            raise UnknownDurationOption(option) from None

    @property
    def session_count(self) -> Optional[int]:
        """Number of sessions for next_K_session(s) options."""
        return _SESSION_COUNTS.get(self)

    @property
    def month_span(self) -> Optional[int]:
        """Number of calendar months covered by month options."""
        return _MONTH_SPANS.get(self)


_SESSION_COUNTS = {
    DurationOption.NEXT_1_SESSION: 1,
    DurationOption.NEXT_2_SESSIONS: 2,
    DurationOption.NEXT_3_SESSIONS: 3,
    DurationOption.NEXT_4_SESSIONS: 4,
    DurationOption.NEXT_5_SESSIONS: 5,
    DurationOption.NEXT_6_SESSIONS: 6,
    DurationOption.NEXT_7_SESSIONS: 7,
    DurationOption.NEXT_8_SESSIONS: 8,
}

_MONTH_SPANS = {
    DurationOption.CURRENT_MONTH: 1,
    DurationOption.NEXT_2_MONTHS: 2,
    DurationOption.NEXT_3_MONTHS: 3,
    DurationOption.NEXT_4_MONTHS: 4,
    DurationOption.NEXT_5_MONTHS: 5,
    DurationOption.NEXT_6_MONTHS: 6,
}


class DateRange(NamedTuple):
    start: datetime
    end: datetime

    @classmethod
    def create(cls, start: datetime, end: datetime) -> "DateRange":
        if start > end:
            raise ValueError(f"range start {start} is after end {end}")
        return cls(start, end)


def start_of_month(dt: datetime) -> datetime:
    return datetime.combine(dt.date().replace(day=1), time.min, tzinfo=dt.tzinfo)


def end_of_month(dt: datetime) -> datetime:
    last_day = dt.date() + relativedelta(day=31)
    return datetime.combine(last_day, END_OF_DAY, tzinfo=dt.tzinfo)


def resolve_range(
    option: Union[DurationOption, str], now: Optional[datetime] = None
) -> DateRange:
    """Resolve a duration option to a calendar range around now.

    Month options cover whole calendar months, starting with the month
    now falls in. Session-count options and custom_range are not
    calendar spans; they resolve to the empty range (now, now).
    """
    option = DurationOption.parse(option)
    if now is None:
        now = datetime.now()
    months = option.month_span
    if months is None:
        return DateRange.create(now, now)
    start = start_of_month(now)
    return DateRange.create(start, end_of_month(start + relativedelta(months=months - 1)))
