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

"""Occurrence generation for recurrence rules.

None of these functions raise for a malformed rule; they return an empty
(or truncated) list instead. The failure itself is recorded by
:mod:`cadence.evaluator`.
"""

import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Union

from .evaluator import (
    EvaluablePattern,
    RuleEvaluationError,
    RuleParseFailure,
    parse_rule,
)

logger = logging.getLogger(__name__)

ParseFunction = Callable[
    [str, Optional[datetime]], Union[EvaluablePattern, RuleParseFailure]
]

# Last instant of a day, at millisecond resolution.
END_OF_DAY = time(23, 59, 59, 999000)


def start_of_day(day: Union[date, datetime]) -> datetime:
    if isinstance(day, datetime):
        return datetime.combine(day.date(), time.min, tzinfo=day.tzinfo)
    return datetime.combine(day, time.min)


def end_of_day(day: Union[date, datetime]) -> datetime:
    if isinstance(day, datetime):
        return datetime.combine(day.date(), END_OF_DAY, tzinfo=day.tzinfo)
    return datetime.combine(day, END_OF_DAY)


def occurrences_in_window(
    rule_text: str,
    start: datetime,
    end: datetime,
    dtstart: Optional[datetime] = None,
    parse: ParseFunction = parse_rule,
) -> list[datetime]:
    """Return the occurrences of a rule within [start, end].

    Both bounds are inclusive. A start after end is not reordered and
    yields no occurrences.
    """
    pattern = parse(rule_text, dtstart)
    if not pattern:
        return []
    try:
        return list(pattern.between(start, end, inclusive=True))
    except RuleEvaluationError:
        return []


def matches_day(
    rule_text: str,
    day: Union[date, datetime],
    dtstart: Optional[datetime] = None,
    parse: ParseFunction = parse_rule,
) -> bool:
    """Check whether a rule has an occurrence on a given calendar day."""
    occurrences = occurrences_in_window(
        rule_text, start_of_day(day), end_of_day(day), dtstart=dtstart, parse=parse
    )
    return len(occurrences) > 0


def next_occurrences(
    rule_text: str,
    count: int,
    start: Optional[datetime] = None,
    dtstart: Optional[datetime] = None,
    parse: ParseFunction = parse_rule,
) -> list[datetime]:
    """Return up to count occurrences strictly after start.

    :param count: Maximum number of occurrences; must not be negative
    :param start: Cursor to search from, defaults to now. An occurrence
        at exactly this instant is not included.
    :return: list of occurrences, shorter than count if the rule ran out
    """
    if count < 0:
        raise ValueError(f"count must not be negative, got {count!r}")
    if count == 0:
        return []
    if start is None:
        start = datetime.now()
    pattern = parse(rule_text, dtstart)
    if not pattern:
        return []
    ret: list[datetime] = []
    cursor = start
    for _ in range(count):
        try:
            found = pattern.after(cursor, inclusive=False)
        except RuleEvaluationError:
            break
        if found is None:
            logger.debug("Rule %r exhausted after %d occurrences", rule_text, len(ret))
            break
        ret.append(found)
        cursor = found
    return ret


def next_occurrence(
    rule_text: str,
    start: Optional[datetime] = None,
    dtstart: Optional[datetime] = None,
) -> Optional[datetime]:
    """Return the first occurrence strictly after start, or None."""
    found = next_occurrences(rule_text, 1, start, dtstart=dtstart)
    if not found:
        return None
    return found[0]
