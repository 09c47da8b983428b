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

"""Recurrence rule evaluation.

Rule text is handed to ``dateutil.rrule.rrulestr``. Parsing either yields
an :class:`EvaluablePattern` or a :class:`RuleParseFailure`; failures are
logged and counted here and nowhere else.
"""

import logging
from datetime import datetime
from typing import Optional, Union

import dateutil.rrule
from prometheus_client import Counter

logger = logging.getLogger(__name__)

rule_failure_counter = Counter(
    "cadence_rule_failures_total",
    "Recurrence rules that could not be parsed or evaluated",
    ["stage"],
)

# Errors rrulestr raises for text it does not understand.
_PARSE_ERRORS = (ValueError, KeyError, IndexError, TypeError, OverflowError)

# Errors raised while iterating a parsed rule, e.g. comparing a naive
# bound against an aware DTSTART, running past datetime.max or an
# out-of-range nth weekday such as BYDAY=+9MO.
_EVALUATION_ERRORS = (ValueError, KeyError, IndexError, TypeError, OverflowError)


class RuleEvaluationError(Exception):
    """Evaluating a parsed rule failed."""

    def __init__(self, rule_text: str, reason: str) -> None:
        super().__init__(f"Unable to evaluate rule {rule_text!r}: {reason}")
        self.rule_text = rule_text
        self.reason = reason


class RuleParseFailure:
    """Rule text that could not be turned into a pattern."""

    def __init__(self, rule_text, reason: str) -> None:
        self.rule_text = rule_text
        self.reason = reason

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other):
        return (
            isinstance(other, type(self))
            and self.rule_text == other.rule_text
            and self.reason == other.reason
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rule_text!r}, {self.reason!r})"


def record_failure(stage: str, rule_text, reason: str) -> None:
    logger.warning("Invalid recurrence rule (%s): %r: %s", stage, rule_text, reason)
    rule_failure_counter.labels(stage).inc()


class EvaluablePattern:
    """A parsed recurrence pattern."""

    rule_text: str

    def between(
        self, start: datetime, end: datetime, inclusive: bool = True
    ) -> list[datetime]:
        """Return all occurrences between start and end, ascending.

        :param inclusive: Whether occurrences equal to start or end count
        :raise RuleEvaluationError: when the pattern can not be evaluated
        """
        raise NotImplementedError(self.between)

    def after(self, instant: datetime, inclusive: bool = False) -> Optional[datetime]:
        """Return the first occurrence after instant, or None.

        :param inclusive: Whether an occurrence equal to instant counts
        :raise RuleEvaluationError: when the pattern can not be evaluated
        """
        raise NotImplementedError(self.after)


class DateutilPattern(EvaluablePattern):
    """Pattern backed by a dateutil rruleset."""

    def __init__(self, rule_text: str, ruleset: dateutil.rrule.rruleset) -> None:
        self.rule_text = rule_text
        self._ruleset = ruleset

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rule_text!r})"

    def _evaluation_failed(self, e):
        record_failure("evaluate", self.rule_text, str(e))
        return RuleEvaluationError(self.rule_text, str(e))

    def between(self, start, end, inclusive=True):
        try:
            return self._ruleset.between(start, end, inc=inclusive)
        except _EVALUATION_ERRORS as e:
            raise self._evaluation_failed(e) from e

    def after(self, instant, inclusive=False):
        try:
            return self._ruleset.after(instant, inc=inclusive)
        except _EVALUATION_ERRORS as e:
            raise self._evaluation_failed(e) from e


def parse_rule(
    rule_text: str, dtstart: Optional[datetime] = None
) -> Union[EvaluablePattern, RuleParseFailure]:
    """Parse recurrence rule text.

    :param rule_text: RRULE text, optionally with DTSTART/RDATE/EXDATE lines
    :param dtstart: Series start, used when rule_text has no DTSTART line.
        Defaults to the current time.
    :return: an EvaluablePattern, or a RuleParseFailure
    """
    if not isinstance(rule_text, str) or not rule_text.strip():
        failure = RuleParseFailure(rule_text, "empty rule")
        record_failure("parse", rule_text, failure.reason)
        return failure
    try:
        ruleset = dateutil.rrule.rrulestr(
            rule_text.strip(), dtstart=dtstart, forceset=True, unfold=True
        )
    except _PARSE_ERRORS as e:
        failure = RuleParseFailure(rule_text, str(e) or type(e).__name__)
        record_failure("parse", rule_text, failure.reason)
        return failure
    # rrulestr accepts INTERVAL=0, which never advances when iterated.
    for rule in ruleset._rrule + ruleset._exrule:
        if rule._interval < 1:
            failure = RuleParseFailure(rule_text, "INTERVAL must be positive")
            record_failure("parse", rule_text, failure.reason)
            return failure
    return DateutilPattern(rule_text, ruleset)
