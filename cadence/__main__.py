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

"""Cadence command-line handling."""

import argparse
import logging
import sys
from datetime import datetime

from . import __version__
from .config import ScheduleConfig
from .formatting import badge_text, describe_rule
from .occurrences import matches_day, next_occurrences, occurrences_in_window
from .planning import plan_sessions
from .ranges import DurationOption, UnknownDurationOption, resolve_range


def parse_datetime(text):
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 date: {text!r}") from None


def parse_duration(text):
    try:
        return DurationOption.parse(text)
    except UnknownDurationOption as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def add_rule_arguments(parser):
    parser.add_argument(
        "rule", nargs="?", default=None,
        help="Recurrence rule, e.g. FREQ=WEEKLY;BYDAY=MO. "
        "Defaults to the rule in --config.")
    parser.add_argument(
        "--dtstart", type=parse_datetime, default=None,
        help="Start of the series, if the rule has no DTSTART.")


def write_dates(dates, out):
    for dt in dates:
        out.write(dt.isoformat() + "\n")


def load_config(path):
    if path is None:
        return ScheduleConfig()
    with open(path, encoding="utf-8") as f:
        return ScheduleConfig.from_file(f)


def _config_default(parser, getter):
    try:
        return getter()
    except KeyError:
        return None
    except ValueError as e:
        parser.error(f"invalid schedule file: {e}")


def main(argv=None, out=None):
    if argv is None:
        argv = sys.argv[1:]
    if out is None:
        out = sys.stdout

    parser = argparse.ArgumentParser(prog="cadence")
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s " + ".".join(map(str, __version__)),
    )
    parser.add_argument(
        "--config", dest="config", default=None,
        help="Schedule file to read default rule and duration from.")
    parser.add_argument(
        "--debug", action="store_true", help="Print debug messages.")

    subparsers = parser.add_subparsers(help="Subcommands", dest="subcommand")

    occurrences_parser = subparsers.add_parser(
        "occurrences", help="List occurrences within a window")
    add_rule_arguments(occurrences_parser)
    occurrences_parser.add_argument("--start", type=parse_datetime, required=True)
    occurrences_parser.add_argument("--end", type=parse_datetime, required=True)

    matches_parser = subparsers.add_parser(
        "matches", help="Check whether a day matches the rule")
    add_rule_arguments(matches_parser)
    matches_parser.add_argument("--day", type=parse_datetime, required=True)

    next_parser = subparsers.add_parser(
        "next", help="List the next occurrences")
    add_rule_arguments(next_parser)
    next_parser.add_argument(
        "-n", "--count", type=int, default=None,
        help="Number of occurrences. [1]")
    next_parser.add_argument(
        "--from", dest="start", type=parse_datetime, default=None,
        help="Cursor to search from. [now]")

    range_parser = subparsers.add_parser(
        "range", help="Resolve a duration option to a date range")
    range_parser.add_argument("duration", type=parse_duration, nargs="?")
    range_parser.add_argument("--now", type=parse_datetime, default=None)

    plan_parser = subparsers.add_parser(
        "plan", help="List session dates for a duration option")
    add_rule_arguments(plan_parser)
    plan_parser.add_argument(
        "--duration", type=parse_duration, default=None,
        help="Duration option. [next_1_session]")
    plan_parser.add_argument("--now", type=parse_datetime, default=None)
    plan_parser.add_argument("--start", type=parse_datetime, default=None)
    plan_parser.add_argument("--end", type=parse_datetime, default=None)

    describe_parser = subparsers.add_parser(
        "describe", help="Describe the rule in words")
    add_rule_arguments(describe_parser)
    describe_parser.add_argument(
        "--short", action="store_true", help="Use abbreviated day names.")
    describe_parser.add_argument(
        "--badge", action="store_true", help="Print compact badge text.")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    if args.subcommand is None:
        parser.print_help()
        return 1

    config = load_config(args.config)

    if args.subcommand == "range":
        duration = args.duration or _config_default(parser, config.get_duration)
        if duration is None:
            parser.error("no duration option given")
        window = resolve_range(duration, args.now)
        out.write(f"{window.start.isoformat()}\n{window.end.isoformat()}\n")
        return 0

    rule = args.rule or _config_default(parser, config.get_rule)
    if rule is None:
        parser.error("no recurrence rule given")
    dtstart = args.dtstart or _config_default(parser, config.get_dtstart)

    if args.subcommand == "occurrences":
        write_dates(
            occurrences_in_window(rule, args.start, args.end, dtstart=dtstart), out)
    elif args.subcommand == "matches":
        if matches_day(rule, args.day.date(), dtstart=dtstart):
            out.write("yes\n")
        else:
            out.write("no\n")
            return 1
    elif args.subcommand == "next":
        count = args.count
        if count is None:
            count = _config_default(parser, config.get_count)
        if count is None:
            count = 1
        if count < 0:
            parser.error("count must not be negative")
        write_dates(next_occurrences(rule, count, args.start, dtstart=dtstart), out)
    elif args.subcommand == "plan":
        duration = (
            args.duration
            or _config_default(parser, config.get_duration)
            or DurationOption.NEXT_1_SESSION)
        try:
            dates = plan_sessions(
                rule, duration, now=args.now, custom_start=args.start,
                custom_end=args.end, dtstart=dtstart)
        except ValueError as e:
            parser.error(str(e))
        if not dates:
            logging.warning("No matching dates found for %s.", duration.value)
        write_dates(dates, out)
    elif args.subcommand == "describe":
        if args.badge:
            out.write(badge_text(rule) + "\n")
        else:
            out.write(describe_rule(rule, short=args.short) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
