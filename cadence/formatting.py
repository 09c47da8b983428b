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

"""Human readable descriptions of recurrence rules."""

import re
from typing import NamedTuple, Optional

from icalendar.prop import vRecur

WEEKDAY_NAMES = {
    "SU": "Sunday",
    "MO": "Monday",
    "TU": "Tuesday",
    "WE": "Wednesday",
    "TH": "Thursday",
    "FR": "Friday",
    "SA": "Saturday",
}

WEEKDAY_SHORT_NAMES = {k: v[:3] for (k, v) in WEEKDAY_NAMES.items()}

_UNITS = {
    "DAILY": ("Daily", "days"),
    "WEEKLY": ("Weekly", "weeks"),
    "MONTHLY": ("Monthly", "months"),
    "YEARLY": ("Yearly", "years"),
}

_BADGE_ABBREVIATIONS = [
    ("Every ", ""),
    (" days", "d"),
    (" weeks", "w"),
    (" months", "m"),
    (" years", "y"),
]

_COMMON_PATTERNS = [
    re.compile(r"^(Daily|Weekly|Monthly|Yearly)$"),
    re.compile(
        r"^Weekly on (Sunday|Monday|Tuesday|Wednesday|Thursday|Friday|Saturday)s?$"
    ),
    re.compile(r"^Every \d+ (days|weeks|months|years)$"),
]


class PatternInfo(NamedTuple):
    is_common: bool
    type: str
    formatted: Optional[str] = None


def _extract_rrule(rule_text: str) -> str:
    for line in rule_text.splitlines():
        line = line.strip()
        if line.upper().startswith("RRULE:"):
            return line[len("RRULE:"):]
        if ":" not in line and "=" in line:
            return line
    return rule_text.strip()


def describe_rule(rule_text: Optional[str], short: bool = False) -> str:
    """Describe a recurrence rule, e.g. "Every 2 weeks on Mondays".

    Text that can not be described is returned as is.
    """
    if not rule_text or not rule_text.strip():
        return "No recurrence"
    try:
        parts = vRecur.from_ical(_extract_rrule(rule_text))
    except ValueError:
        return rule_text
    if "FREQ" not in parts:
        return rule_text
    freq = str(parts["FREQ"][0]).upper()
    try:
        (single, plural) = _UNITS[freq]
    except KeyError:
        return rule_text
    interval = int(parts.get("INTERVAL", [1])[0])
    if interval == 1:
        text = single
    else:
        text = f"Every {interval} {plural}"
    if freq != "WEEKLY" or not parts.get("BYDAY"):
        return text
    days = [str(day).strip() for day in parts["BYDAY"]]
    names = WEEKDAY_SHORT_NAMES if short else WEEKDAY_NAMES
    formatted = ", ".join(names.get(day, day) for day in days)
    if len(days) == 1:
        if short:
            return f"{text} on {formatted}"
        return f"{text} on {formatted}s"
    elif len(days) == 7:
        return f"{text} (all days)"
    return f"{text} on {formatted}"


def badge_text(rule_text: Optional[str]) -> str:
    """Compact description for badges, e.g. "2w"."""
    if not rule_text or not rule_text.strip():
        return ""
    text = describe_rule(rule_text, short=True)
    for old, new in _BADGE_ABBREVIATIONS:
        text = text.replace(old, new)
    return text


def analyze_pattern(rule_text: Optional[str]) -> PatternInfo:
    if not rule_text:
        return PatternInfo(False, "none")
    formatted = describe_rule(rule_text)
    is_common = any(p.match(formatted) for p in _COMMON_PATTERNS)
    return PatternInfo(is_common, "standard" if is_common else "custom", formatted)
