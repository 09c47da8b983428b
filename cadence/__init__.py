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

"""Recurrence rule evaluation and session scheduling."""

__version__ = (0, 1, 0)

from .evaluator import (  # noqa: F401
    EvaluablePattern,
    RuleEvaluationError,
    RuleParseFailure,
    parse_rule,
)
from .occurrences import (  # noqa: F401
    matches_day,
    next_occurrence,
    next_occurrences,
    occurrences_in_window,
)
from .ranges import DateRange, DurationOption, resolve_range  # noqa: F401
