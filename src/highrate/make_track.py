#!/usr/bin/env python3
"""
Densify a recorded lat,lon track for high rate replay.

• Reads a header-less lat,lon[,...] CSV (gpsbabel csv output) in chunks
• Drops rows whose lat/lon are not numeric
• Linearly interpolates (factor - 1) fixes between every pair of fixes,
  factor = source interval / target interval (1000 ms -> 100 ms is 10x)
• Writes lat,lon, rows that `highrate` can replay directly

Same job as:  gpsbabel -i gpx -f in.gpx -x interpolate,time=0.1 -o csv -F out.csv
"""

import argparse

import numpy as np
import pandas as pd
from tqdm import tqdm

# ─── CONFIG ──────────────────────────────────────────────────────────────────────
SOURCE_MS  = 1000   # 1 Hz recording
TARGET_MS  = 100    # 10 Hz replay
CHUNKSIZE  = 50000
DECIMALS   = 6      # ~0.1 m


def rate_factor(source_ms: int, target_ms: int) -> int:
    """Number of output rows per input interval; must divide evenly."""
    if source_ms <= 0 or target_ms <= 0:
        raise ValueError("intervals must be positive")
    if source_ms % target_ms:
        raise ValueError(f"{source_ms} ms is not a multiple of {target_ms} ms")
    return source_ms // target_ms


def load_track(csv_path: str, chunksize: int = CHUNKSIZE) -> pd.DataFrame:
    """Loads the first two columns of the track as float lat/lon."""
    try:
        reader = pd.read_csv(
            csv_path,
            header=None,
            usecols=[0, 1],
            dtype=str,
            chunksize=chunksize,
            on_bad_lines='skip',
        )
        chunks = [chunk for chunk in tqdm(reader, desc=f'Loading {csv_path}', unit='chunk')]
    except pd.errors.EmptyDataError:
        return pd.DataFrame({'lat': [], 'lon': []}, dtype=float)

    df = pd.concat(chunks, ignore_index=True)
    df.columns = ['lat', 'lon']
    df = df.apply(pd.to_numeric, errors='coerce')
    return df.dropna().reset_index(drop=True)


def densify(track: pd.DataFrame, factor: int) -> pd.DataFrame:
    """
    Returns (n - 1) * factor + 1 fixes. Every factor-th output row is an
    original fix, the rows between lie on the straight line joining them.
    """
    if factor < 1:
        raise ValueError("factor must be >= 1")
    n = len(track)
    if n < 2 or factor == 1:
        return track[['lat', 'lon']].reset_index(drop=True).copy()

    t  = np.arange(n)
    tq = np.arange((n - 1) * factor + 1) / factor
    return pd.DataFrame({
        'lat': np.interp(tq, t, track['lat'].to_numpy(dtype=float)),
        'lon': np.interp(tq, t, track['lon'].to_numpy(dtype=float)),
    })


def write_track(track: pd.DataFrame, out_path: str):
    # trailing empty column gives gpsbabel's "lat,lon," rows
    out = track[['lat', 'lon']].assign(tail='')
    out.to_csv(out_path, header=False, index=False, float_format=f'%.{DECIMALS}f')


def make_track(input_path: str, out_path: str, source_ms: int = SOURCE_MS, target_ms: int = TARGET_MS):
    factor = rate_factor(source_ms, target_ms)
    track  = load_track(input_path)
    dense  = densify(track, factor)
    write_track(dense, out_path)
    print(f"Wrote {len(dense):,} rows "
          f"({len(track):,} fixes x{factor}, {1000 / target_ms:g} Hz) → {out_path}")
    return dense


def main():
    parser = argparse.ArgumentParser(
        description='Interpolate a lat,lon track to a high replay rate'
    )
    parser.add_argument('--input', required=True, help='lat,lon CSV to densify')
    parser.add_argument('--out', required=True, help='Where to write the dense track')
    parser.add_argument('--source-ms', type=int, default=SOURCE_MS,
                        help='Interval between input fixes (default: 1000)')
    parser.add_argument('--target-ms', type=int, default=TARGET_MS,
                        help='Interval between output fixes (default: 100)')
    args = parser.parse_args()
    try:
        make_track(args.input, args.out, args.source_ms, args.target_ms)
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
