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

"""Schedule configuration file.

A schedule file is an INI file with the recurring occasion's defaults in
its DEFAULT section::

    [DEFAULT]
    rule = FREQ=WEEKLY;BYDAY=MO
    dtstart = 2024-01-01T09:00:00
    duration = next_3_months
    count = 4
"""

import configparser
from datetime import datetime

from .ranges import DurationOption

FILENAME = ".cadence"


class ScheduleConfig:
    """Defaults for a recurring schedule."""

    def __init__(self, cp=None, save=None):
        if cp is None:
            cp = configparser.ConfigParser(interpolation=None)
        self._configparser = cp
        self._save_cb = save

    def _save(self, message):
        if self._save_cb is None:
            return
        self._save_cb(self._configparser, message)

    @classmethod
    def from_file(cls, f):
        cp = configparser.ConfigParser(interpolation=None)
        cp.read_file(f)
        return cls(cp)

    def _set(self, name, value, message):
        if value is not None:
            self._configparser["DEFAULT"][name] = value
        else:
            del self._configparser["DEFAULT"][name]
        self._save(message)

    def get_rule(self):
        return self._configparser["DEFAULT"]["rule"]

    def set_rule(self, rule):
        self._set("rule", rule, "Set recurrence rule.")

    def get_dtstart(self):
        return datetime.fromisoformat(self._configparser["DEFAULT"]["dtstart"])

    def set_dtstart(self, dtstart):
        self._set(
            "dtstart",
            dtstart.isoformat() if dtstart is not None else None,
            "Set series start.",
        )

    def get_duration(self):
        return DurationOption.parse(self._configparser["DEFAULT"]["duration"])

    def set_duration(self, duration):
        if duration is not None:
            duration = DurationOption.parse(duration).value
        self._set("duration", duration, "Set duration option.")

    def get_count(self):
        return int(self._configparser["DEFAULT"]["count"])

    def set_count(self, count):
        self._set("count", str(count) if count is not None else None, "Set count.")
