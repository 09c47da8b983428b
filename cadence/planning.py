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

"""Picking session dates for a recurring occasion."""

import logging
from datetime import date, datetime
from typing import Optional, Union

from .occurrences import matches_day, next_occurrences, occurrences_in_window
from .ranges import DurationOption, resolve_range

logger = logging.getLogger(__name__)


class MissingCustomRange(ValueError):
    def __init__(self) -> None:
        super().__init__("custom_range requires both a start and an end date")


class InvalidRange(ValueError):
    def __init__(self, start, end) -> None:
        super().__init__(f"range start {start} is after end {end}")
        self.start = start
        self.end = end


class DateMismatch(ValueError):
    def __init__(self, rule_text: str, day) -> None:
        super().__init__(f"{day} does not match recurrence pattern {rule_text!r}")
        self.rule_text = rule_text
        self.day = day


def plan_sessions(
    rule_text: str,
    option: Union[DurationOption, str],
    now: Optional[datetime] = None,
    custom_start: Optional[datetime] = None,
    custom_end: Optional[datetime] = None,
    dtstart: Optional[datetime] = None,
) -> list[datetime]:
    """Pick the session dates a bulk duration option stands for.

    Session-count options take the next K occurrences after now,
    custom_range takes the occurrences between custom_start and
    custom_end, and month options take the occurrences within the
    resolved calendar months.
    """
    option = DurationOption.parse(option)
    if now is None:
        now = datetime.now()
    if option.session_count is not None:
        return next_occurrences(rule_text, option.session_count, now, dtstart=dtstart)
    if option is DurationOption.CUSTOM_RANGE:
        if custom_start is None or custom_end is None:
            raise MissingCustomRange()
        if custom_start > custom_end:
            raise InvalidRange(custom_start, custom_end)
        return occurrences_in_window(rule_text, custom_start, custom_end, dtstart=dtstart)
    window = resolve_range(option, now)
    logger.debug("Planning %s as %s - %s", option.value, window.start, window.end)
    return occurrences_in_window(rule_text, window.start, window.end, dtstart=dtstart)


def check_session_date(
    rule_text: str, day: Union[date, datetime], dtstart: Optional[datetime] = None
) -> None:
    """Raise DateMismatch if day is not an occurrence day of rule_text."""
    if not matches_day(rule_text, day, dtstart=dtstart):
        raise DateMismatch(rule_text, day)
