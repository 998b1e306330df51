import pytest

from highrate.config import ReplayConfig


class RecordingSink:
    """Stands in for PipeWriter; keeps every record in write order."""

    def __init__(self):
        self.records = []

    def write(self, record):
        self.records.append(record)


class FakeSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def track_file(tmp_path):
    path = tmp_path / 'live-10-Hz.csv'
    path.write_text(
        "60.1699,24.9384,\n"
        "60.1700,24.9386,\n"
        "60.1701,24.9388,\n"
    )
    return path


@pytest.fixture
def config(track_file):
    return ReplayConfig(
        simulation_file=str(track_file),
        simulation_target='CHARLIE-1',
        target_symbol='SNGPU-------',
        interval_ms=100,
    )


@pytest.fixture
def write_ini(tmp_path):
    def _write(body, name='highrate.ini'):
        path = tmp_path / name
        path.write_text(body)
        return path
    return _write
