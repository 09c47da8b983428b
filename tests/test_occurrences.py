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

"""Tests for cadence.occurrences."""

import unittest
from datetime import date, datetime, timedelta, timezone

from cadence.evaluator import EvaluablePattern, RuleEvaluationError
from cadence.occurrences import (
    end_of_day,
    matches_day,
    next_occurrence,
    next_occurrences,
    occurrences_in_window,
    start_of_day,
)

WEEKLY_MONDAY = """\
DTSTART:20240101T090000
RRULE:FREQ=WEEKLY;BYDAY=MO"""

DAILY_TWICE = """\
DTSTART:20240101T090000
RRULE:FREQ=DAILY;COUNT=2"""


class StepPattern(EvaluablePattern):
    """Pattern with an occurrence every day, failing after a few calls."""

    rule_text = "step"

    def __init__(self, fail_after=None):
        self.calls = 0
        self.fail_after = fail_after

    def between(self, start, end, inclusive=True):
        raise RuleEvaluationError(self.rule_text, "between not supported")

    def after(self, instant, inclusive=False):
        self.calls += 1
        if self.fail_after is not None and self.calls > self.fail_after:
            raise RuleEvaluationError(self.rule_text, "broken")
        return instant + timedelta(days=1)


def forbidden_parse(rule_text, dtstart):
    raise AssertionError("parse should not have been called")


class DayBoundaryTests(unittest.TestCase):
    def test_start_of_day(self):
        self.assertEqual(datetime(2024, 2, 29), start_of_day(date(2024, 2, 29)))
        self.assertEqual(
            datetime(2024, 2, 29), start_of_day(datetime(2024, 2, 29, 13, 45, 12))
        )

    def test_end_of_day(self):
        self.assertEqual(
            datetime(2024, 2, 29, 23, 59, 59, 999000), end_of_day(date(2024, 2, 29))
        )

    def test_keeps_tzinfo(self):
        dt = datetime(2024, 2, 29, 13, 45, tzinfo=timezone.utc)
        self.assertEqual(timezone.utc, start_of_day(dt).tzinfo)
        self.assertEqual(timezone.utc, end_of_day(dt).tzinfo)


class OccurrencesInWindowTests(unittest.TestCase):
    def test_four_mondays(self):
        start = datetime(2024, 1, 1)
        end = datetime(2024, 1, 28, 23, 59, 59)
        found = occurrences_in_window(WEEKLY_MONDAY, start, end)
        self.assertEqual(4, len(found))
        for dt in found:
            self.assertEqual(0, dt.weekday())
            self.assertTrue(start <= dt <= end)
        for a, b in zip(found, found[1:]):
            self.assertEqual(timedelta(days=7), b - a)

    def test_inclusive_bounds(self):
        found = occurrences_in_window(
            WEEKLY_MONDAY, datetime(2024, 1, 8, 9, 0), datetime(2024, 1, 22, 9, 0)
        )
        self.assertEqual(
            [
                datetime(2024, 1, 8, 9, 0),
                datetime(2024, 1, 15, 9, 0),
                datetime(2024, 1, 22, 9, 0),
            ],
            found,
        )

    def test_idempotent(self):
        args = (WEEKLY_MONDAY, datetime(2024, 1, 1), datetime(2024, 3, 1))
        self.assertEqual(occurrences_in_window(*args), occurrences_in_window(*args))

    def test_dtstart_argument(self):
        found = occurrences_in_window(
            "FREQ=WEEKLY;BYDAY=MO",
            datetime(2024, 1, 1),
            datetime(2024, 1, 14),
            dtstart=datetime(2024, 1, 1, 18, 30),
        )
        self.assertEqual(
            [datetime(2024, 1, 1, 18, 30), datetime(2024, 1, 8, 18, 30)], found
        )

    def test_malformed_rule(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertEqual(
                [],
                occurrences_in_window(
                    "FREQ=NEVER;BYDAY=XX", datetime(2024, 1, 1), datetime(2024, 2, 1)
                ),
            )

    def test_evaluation_failure(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertEqual(
                [],
                occurrences_in_window(
                    "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY",
                    datetime(2024, 1, 1),
                    datetime(2024, 2, 1),
                ),
            )

    def test_zero_interval(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertEqual(
                [],
                occurrences_in_window(
                    "FREQ=DAILY;INTERVAL=0",
                    datetime(2024, 1, 1),
                    datetime(2024, 2, 1),
                    dtstart=datetime(2024, 1, 1),
                ),
            )

    def test_nth_weekday_out_of_range(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertEqual(
                [],
                occurrences_in_window(
                    "FREQ=MONTHLY;BYDAY=+9MO",
                    datetime(2024, 1, 1),
                    datetime(2024, 6, 1),
                    dtstart=datetime(2024, 1, 1),
                ),
            )
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertFalse(
                matches_day(
                    "FREQ=MONTHLY;BYDAY=+9MO",
                    date(2024, 1, 1),
                    dtstart=datetime(2024, 1, 1),
                )
            )

    def test_reversed_window(self):
        self.assertEqual(
            [],
            occurrences_in_window(
                WEEKLY_MONDAY, datetime(2024, 2, 1), datetime(2024, 1, 1)
            ),
        )

    def test_failing_pattern(self):
        self.assertEqual(
            [],
            occurrences_in_window(
                "step",
                datetime(2024, 1, 1),
                datetime(2024, 2, 1),
                parse=lambda rule_text, dtstart: StepPattern(),
            ),
        )


class MatchesDayTests(unittest.TestCase):
    def test_matching_day(self):
        self.assertTrue(matches_day(WEEKLY_MONDAY, date(2024, 1, 15)))

    def test_non_matching_day(self):
        self.assertFalse(matches_day(WEEKLY_MONDAY, date(2024, 1, 16)))

    def test_datetime_uses_whole_day(self):
        # The occurrence is at 09:00; the time of day given is irrelevant.
        self.assertTrue(matches_day(WEEKLY_MONDAY, datetime(2024, 1, 15, 23, 0)))

    def test_equivalent_to_window(self):
        for offset in range(14):
            day = date(2024, 1, 1) + timedelta(days=offset)
            self.assertEqual(
                bool(
                    occurrences_in_window(
                        WEEKLY_MONDAY, start_of_day(day), end_of_day(day)
                    )
                ),
                matches_day(WEEKLY_MONDAY, day),
            )

    def test_malformed_rule(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertFalse(matches_day("nonsense", date(2024, 1, 15)))


class NextOccurrencesTests(unittest.TestCase):
    def test_next(self):
        self.assertEqual(
            [
                datetime(2024, 1, 8, 9, 0),
                datetime(2024, 1, 15, 9, 0),
                datetime(2024, 1, 22, 9, 0),
            ],
            next_occurrences(WEEKLY_MONDAY, 3, datetime(2024, 1, 1, 9, 0)),
        )

    def test_start_not_included(self):
        found = next_occurrences(WEEKLY_MONDAY, 5, datetime(2024, 1, 8, 9, 0))
        self.assertEqual(5, len(found))
        self.assertTrue(all(dt > datetime(2024, 1, 8, 9, 0) for dt in found))
        self.assertEqual(sorted(set(found)), found)

    def test_zero(self):
        self.assertEqual(
            [], next_occurrences(WEEKLY_MONDAY, 0, datetime(2024, 1, 1), parse=forbidden_parse)
        )
        self.assertEqual([], next_occurrences("garbage", 0))

    def test_negative(self):
        self.assertRaises(ValueError, next_occurrences, WEEKLY_MONDAY, -1)

    def test_exhausted(self):
        self.assertEqual(
            [datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 2, 9, 0)],
            next_occurrences(DAILY_TWICE, 5, datetime(2023, 12, 31)),
        )

    def test_until(self):
        rule = "DTSTART:20240101T090000\nRRULE:FREQ=WEEKLY;UNTIL=20240115T090000"
        self.assertEqual(
            [datetime(2024, 1, 8, 9, 0), datetime(2024, 1, 15, 9, 0)],
            next_occurrences(rule, 10, datetime(2024, 1, 1, 9, 0)),
        )

    def test_malformed_rule(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertEqual([], next_occurrences("FREQ=", 3, datetime(2024, 1, 1)))

    def test_zero_interval(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertEqual(
                [],
                next_occurrences(
                    "FREQ=DAILY;INTERVAL=0",
                    3,
                    datetime(2024, 1, 1),
                    dtstart=datetime(2024, 1, 1),
                ),
            )

    def test_nth_weekday_out_of_range(self):
        with self.assertLogs("cadence.evaluator", level="WARNING"):
            self.assertEqual(
                [],
                next_occurrences(
                    "FREQ=MONTHLY;BYDAY=+9MO",
                    3,
                    datetime(2024, 1, 1),
                    dtstart=datetime(2024, 1, 1),
                ),
            )

    def test_truncated_on_failure(self):
        pattern = StepPattern(fail_after=2)
        self.assertEqual(
            [datetime(2024, 1, 2), datetime(2024, 1, 3)],
            next_occurrences(
                "step", 5, datetime(2024, 1, 1), parse=lambda rule_text, dtstart: pattern
            ),
        )
        self.assertEqual(3, pattern.calls)

    def test_bounded_iterations(self):
        pattern = StepPattern()
        found = next_occurrences(
            "step", 4, datetime(2024, 1, 1), parse=lambda rule_text, dtstart: pattern
        )
        self.assertEqual(4, len(found))
        self.assertEqual(4, pattern.calls)

    def test_next_occurrence(self):
        self.assertEqual(
            datetime(2024, 1, 8, 9, 0),
            next_occurrence(WEEKLY_MONDAY, datetime(2024, 1, 2)),
        )
        self.assertIsNone(next_occurrence(DAILY_TWICE, datetime(2024, 1, 2, 9, 0)))
