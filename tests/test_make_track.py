import pandas as pd
import pytest

from highrate import make_track
from highrate.simulator import parse_row


def test_rate_factor():
    assert make_track.rate_factor(1000, 100) == 10
    assert make_track.rate_factor(1000, 50) == 20
    assert make_track.rate_factor(200, 200) == 1


@pytest.mark.parametrize('source_ms, target_ms', [(1000, 300), (0, 100), (1000, 0)])
def test_rate_factor_rejects_uneven_or_non_positive(source_ms, target_ms):
    with pytest.raises(ValueError):
        make_track.rate_factor(source_ms, target_ms)


def test_densify_keeps_fixes_and_interpolates_between():
    track = pd.DataFrame({'lat': [60.0, 61.0, 61.0], 'lon': [24.0, 24.0, 26.0]})
    dense = make_track.densify(track, 10)

    assert len(dense) == 21
    assert dense.loc[0].tolist() == [60.0, 24.0]
    assert dense.loc[10].tolist() == [61.0, 24.0]
    assert dense.loc[20].tolist() == [61.0, 26.0]
    assert dense.loc[5, 'lat'] == pytest.approx(60.5)
    assert dense.loc[15, 'lon'] == pytest.approx(25.0)


def test_densify_short_track_and_unit_factor():
    single = pd.DataFrame({'lat': [60.0], 'lon': [24.0]})
    assert make_track.densify(single, 10).equals(single)

    track = pd.DataFrame({'lat': [60.0, 61.0], 'lon': [24.0, 25.0]})
    assert make_track.densify(track, 1).equals(track)

    with pytest.raises(ValueError):
        make_track.densify(track, 0)


def test_load_track_reads_gpsbabel_csv(tmp_path):
    path = tmp_path / 'track.csv'
    path.write_text("60.1699,24.9384,\nnot,numbers,\n60.1710,24.9400,\n")
    track = make_track.load_track(str(path))
    assert list(track.columns) == ['lat', 'lon']
    assert track.values.tolist() == [[60.1699, 24.9384], [60.1710, 24.9400]]


def test_load_track_empty_file(tmp_path):
    path = tmp_path / 'empty.csv'
    path.write_text("")
    assert make_track.load_track(str(path)).empty


def test_written_track_replays(tmp_path):
    src = tmp_path / 'live-1-Hz.csv'
    out = tmp_path / 'live-10-Hz.csv'
    src.write_text("60.000000,24.000000,\n60.001000,24.002000,\n")

    dense = make_track.make_track(str(src), str(out), source_ms=1000, target_ms=100)

    lines = out.read_text().splitlines()
    assert len(lines) == len(dense) == 11
    assert lines[0] == "60.000000,24.000000,"
    assert lines[5] == "60.000500,24.001000,"
    assert lines[-1] == "60.001000,24.002000,"
    assert parse_row(lines[5]).latitude == "60.000500"


def test_command_line(tmp_path, monkeypatch, capsys):
    src = tmp_path / 'live-1-Hz.csv'
    out = tmp_path / 'live-20-Hz.csv'
    src.write_text("60.0,24.0,\n60.1,24.1,\n")
    monkeypatch.setattr('sys.argv', [
        'highrate-make-track', '--input', str(src), '--out', str(out), '--target-ms', '50',
    ])

    make_track.main()

    assert len(out.read_text().splitlines()) == 21
    assert 'Wrote 21 rows' in capsys.readouterr().out


def test_command_line_rejects_uneven_rate(tmp_path, monkeypatch):
    src = tmp_path / 'live-1-Hz.csv'
    src.write_text("60.0,24.0,\n60.1,24.1,\n")
    monkeypatch.setattr('sys.argv', [
        'highrate-make-track', '--input', str(src), '--out', str(tmp_path / 'o.csv'), '--target-ms', '300',
    ])
    with pytest.raises(SystemExit):
        make_track.main()
