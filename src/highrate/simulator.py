#!/usr/bin/env python3
"""
Replay a position track into the high rate FIFO.

Reads a lat,lon CSV (e.g. from `gpsbabel -x interpolate,time=0.1 -o csv`)
and writes one record per row to /tmp/wscontrol:

    [lat],[lon],[target_name],[target_symbol]

at the interval set in the ini file:

    50 ms   -> 20 Hz high rate GPS source
    100 ms  -> 10 Hz high rate GPS source
    200 ms  ->  5 Hz high rate GPS source
    1000 ms ->  1 Hz default GPS source

Usage:
    highrate -i highrate.ini [-d]
"""

import sys
import time
import logging
import argparse
import configparser
from dataclasses import dataclass
from typing import Iterator, Optional

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from highrate.config import ReplayConfig
from highrate.sink import PipeWriter, SinkError

# ─── CONFIG ──────────────────────────────────────────────────────────────────────
ALLOWED_INTERVALS_MS = (50, 100, 200, 1000)
LOG_FORMAT = "%(asctime)s [%(process)d] %(levelname)s: %(message)s"

log = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad command line, e.g. -i without a path."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


class RowParseError(ValueError):
    """Line does not carry both a latitude and a longitude field."""


@dataclass(frozen=True)
class PositionRow:
    latitude: str
    longitude: str


@dataclass
class ReplayStats:
    written: int = 0
    skipped: int = 0


def position_stream(csv_path: str) -> Iterator[str]:
    """
    Opens the track file right away, then yields one raw line at a time in
    file order. Bytes that are not UTF-8 survive as surrogates.
    """
    f = open(csv_path, 'r', encoding='utf-8', errors='surrogateescape')

    def lines():
        with f:
            for line in f:
                yield line
    return lines()


def parse_row(line: str) -> PositionRow:
    """
    First field is latitude, second is longitude, the rest is ignored
    (gpsbabel ends each row with a comma). Field text is kept verbatim.
    """
    fields = line.rstrip('\r\n').split(',')
    if len(fields) < 2 or not fields[0] or not fields[1]:
        raise RowParseError(f"expected lat,lon but got {line.rstrip()!r}")
    return PositionRow(latitude=fields[0], longitude=fields[1])


def format_record(row: PositionRow, config: ReplayConfig) -> str:
    return f"{row.latitude},{row.longitude},{config.simulation_target},{config.target_symbol}"


class Pacer:
    """
    Sleeps between rows. Only the intervals in ALLOWED_INTERVALS_MS are
    honoured; anything else runs the replay at full speed.
    """

    def __init__(self, interval_ms: int, sleep=time.sleep):
        self.interval_ms = interval_ms
        self._sleep = sleep
        if interval_ms in ALLOWED_INTERVALS_MS:
            self.delay = interval_ms / 1000.0
        else:
            self.delay = 0.0
            log.warning("Interval %s ms is not one of %s, replaying without delay",
                        interval_ms, ALLOWED_INTERVALS_MS)

    def wait(self):
        if self.delay:
            self._sleep(self.delay)


def start_simulator(config: ReplayConfig, sink, pacer: Optional[Pacer] = None) -> ReplayStats:
    """
    Push every parsable row of config.simulation_file into sink, one
    write per row, in file order, pausing with pacer after each write.
    """
    if pacer is None:
        pacer = Pacer(config.interval_ms)
    stats = ReplayStats()
    rows = position_stream(config.simulation_file)

    log.info("Simulation stream started.")
    with logging_redirect_tqdm():
        for line_no, line in enumerate(tqdm(rows, desc='Replaying', unit='row', disable=None), start=1):
            try:
                row = parse_row(line)
            except RowParseError as e:
                log.warning("line %d skipped: %s", line_no, e)
                stats.skipped += 1
                continue
            record = format_record(row, config)
            log.debug("writing: %s", record)
            sink.write(record)
            stats.written += 1
            pacer.wait()
    log.info("Simulation stream closed. %d rows written, %d skipped.",
             stats.written, stats.skipped)
    return stats


def print_usage():
    log.info("highrate - high rate Target simulator")
    log.info("Usage: -i [ini_file]")
    log.info("       -d debug log")
    log.info("")
    log.info("Simulation file is csv file with lat,lon on each row")
    log.info("You can use 'gpsbabel' to convert files to csv format:")
    log.info("gpsbabel -i gpx -f [input].gpx -o csv -F [output].csv")
    log.info("or densify an existing track with 'highrate-make-track'.")
    log.info("Generate target_symbol (to ini file) at:")
    log.info("https://spatialillusions.com/unitgenerator/")


def main(argv=None) -> int:
    parser = _ArgumentParser(
        prog='highrate',
        description='High rate target simulator',
        add_help=False
    )
    parser.add_argument('-i', dest='ini_file', help='Path to highrate.ini')
    parser.add_argument('-d', dest='debug', action='store_true', help='Debug log')
    parser.add_argument('-h', dest='help', action='store_true', help='Show usage')
    try:
        args, unknown = parser.parse_known_args(argv)
    except UsageError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        log.error("%s", e)
        log.error("ini file not specified, exiting.")
        return 0

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format=LOG_FORMAT)
    if unknown:
        log.warning("ignoring unknown arguments: %s", ' '.join(unknown))

    if args.help:
        print_usage()
        return 1
    if args.ini_file is None:
        log.error("ini file not specified, exiting.")
        return 0

    try:
        config = ReplayConfig.from_ini(args.ini_file)
    except (OSError, configparser.Error) as e:
        log.error("cannot read ini file %s: %s", args.ini_file, e)
        return 1

    try:
        start_simulator(config, PipeWriter())
    except SinkError:
        # already logged by the writer
        return 1
    except OSError as e:
        log.error("cannot read simulation file %s: %s", config.simulation_file, e)
        return 1
    except KeyboardInterrupt:
        log.info("Simulation interrupted.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
