# src/highrate/config.py

import re
import logging
import configparser
from dataclasses import dataclass

# ─── CONFIG ──────────────────────────────────────────────────────────────────────
SECTION = 'highrate'

log = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def atoi(value: str) -> int:
    """Leading integer of value, 0 if there is none ('100ms' -> 100, '' -> 0)."""
    match = _LEADING_INT.match(value or '')
    return int(match.group(1)) if match else 0


@dataclass(frozen=True)
class ReplayConfig:
    """
    Settings for one replay run, read from the [highrate] section.
    Missing keys come back as empty strings (interval as 0); nothing is validated.
    """
    simulation_file: str = ''
    simulation_target: str = ''
    target_symbol: str = ''
    interval_ms: int = 0

    @classmethod
    def from_ini(cls, path: str) -> "ReplayConfig":
        parser = configparser.ConfigParser(interpolation=None)
        # read_file so an unreadable path raises instead of being skipped
        with open(path, 'r', encoding='utf-8', errors='surrogateescape') as f:
            parser.read_file(f)

        def get(key):
            return parser.get(SECTION, key, fallback='')

        config = cls(
            simulation_file=get('simulation_file'),
            simulation_target=get('simulation_target'),
            target_symbol=get('target_symbol'),
            interval_ms=atoi(get('interval_wait_ms')),
        )
        log.info("Simulation file: %s", config.simulation_file)
        log.info("Simulation target: %s", config.simulation_target)
        log.info("Interval (ms): %s", config.interval_ms)
        log.info("Symbol code: %s", config.target_symbol)
        return config
