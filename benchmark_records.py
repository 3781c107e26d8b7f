#!/usr/bin/env python3
"""
Benchmark PalmDoc against gzip and lzma, one file at a time.

Each file is cut into fixed-size records (4096 bytes, as in PalmDOC/MOBI
text sections) and every record is compressed on its own. gzip and lzma get
the whole file in one piece, which is the fair upper bound they would reach
on a plain archive.

Usage:
    python benchmark_records.py benchmark_files/ --output results.json
    python benchmark_records.py benchmark_files/ --random-records 64
"""
import argparse
import glob
import gzip
import json
import lzma
import os
import sys
import time

import numpy as np

from match_finder import MATCHERS
from palmdoc import DEFAULT_MATCHER
from record_codec import RecordCompressor

DEFAULT_RECORD_SIZE = 4096


def format_size(bytes_val):
    """Format bytes as human-readable."""
    if bytes_val < 1024:
        return f"{bytes_val} B"
    elif bytes_val < 1024 * 1024:
        return f"{bytes_val / 1024:.1f} KB"
    else:
        return f"{bytes_val / (1024 * 1024):.1f} MB"


def format_ratio(comp, orig):
    if orig == 0:
        return "0.0%"
    return f"{100 * comp / orig:.2f}%"


def split_records(data, record_size=DEFAULT_RECORD_SIZE):
    """Cut data into consecutive records of at most record_size bytes."""
    if record_size < 1:
        raise ValueError(f"record_size must be >= 1, got {record_size}")
    return [data[i:i + record_size] for i in range(0, len(data), record_size)]


def random_records(count, record_size=DEFAULT_RECORD_SIZE, seed=0):
    """Uniformly random records: the worst case for the compressor."""
    rng = np.random.default_rng(seed)
    buf = rng.integers(0, 256, size=count * record_size, dtype=np.uint8)
    return buf.tobytes()


def _entry(size, orig_size, elapsed):
    return {
        'size': size,
        'ratio': size / orig_size if orig_size else 0.0,
        'bpb': 8 * size / orig_size if orig_size else 0.0,
        'time': elapsed,
    }


def benchmark_bytes(name, data, compressor, record_size=DEFAULT_RECORD_SIZE,
                    verbose=True):
    """Benchmark one buffer with gzip, lzma and per-record PalmDoc."""
    orig_size = len(data)
    results = {
        'filename': name,
        'original_size': orig_size,
        'record_size': record_size,
        'compressors': {},
    }

    t0 = time.time()
    gzip_data = gzip.compress(data, compresslevel=9)
    results['compressors']['gzip'] = _entry(
        len(gzip_data), orig_size, time.time() - t0)

    t0 = time.time()
    lzma_data = lzma.compress(data, preset=9)
    results['compressors']['lzma'] = _entry(
        len(lzma_data), orig_size, time.time() - t0)

    records = split_records(data, record_size)
    results['records'] = len(records)

    t0 = time.time()
    packed = compressor.compress_records(records)
    comp_time = time.time() - t0

    t0 = time.time()
    restored = compressor.decompress_records(packed)
    decomp_time = time.time() - t0

    comp_size = sum(len(p) for p in packed)
    entry = _entry(comp_size, orig_size, comp_time)
    entry['decompress_time'] = decomp_time
    entry['lossless'] = b''.join(restored) == data

    if records:
        record_ratios = np.array(
            [len(p) / len(r) for p, r in zip(packed, records)])
        entry['record_ratio_mean'] = float(record_ratios.mean())
        entry['record_ratio_min'] = float(record_ratios.min())
        entry['record_ratio_max'] = float(record_ratios.max())
    results['compressors']['palmdoc'] = entry

    if verbose:
        print(f"{name}: {format_size(orig_size)} in {len(records)} records",
              file=sys.stderr)
        for method in ('gzip', 'lzma', 'palmdoc'):
            r = results['compressors'][method]
            print(f"  {method:<8} {format_size(r['size']):>10} "
                  f"({format_ratio(r['size'], orig_size):>7}, "
                  f"{r['bpb']:.2f} bpb)  {r['time']:.2f}s", file=sys.stderr)
        print(f"  Lossless: {'PASS' if entry['lossless'] else 'FAIL'}",
              file=sys.stderr)

    return results


def benchmark_file(file_path, compressor, record_size=DEFAULT_RECORD_SIZE,
                   verbose=True):
    """Benchmark a single file."""
    with open(file_path, 'rb') as f:
        data = f.read()
    return benchmark_bytes(os.path.basename(file_path), data, compressor,
                           record_size=record_size, verbose=verbose)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Benchmark PalmDoc records against gzip/lzma")
    parser.add_argument("directory", help="Directory of .txt files")
    parser.add_argument("--output", default="benchmark_record_results.json",
                        help="Where to write the JSON results")
    parser.add_argument("--record-size", type=int, default=DEFAULT_RECORD_SIZE)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--matcher", choices=MATCHERS, default=DEFAULT_MATCHER)
    parser.add_argument("--random-records", type=int, default=0,
                        help="Also benchmark N random (incompressible) records")
    parser.add_argument("-q", "--quiet", action="store_true")
    args = parser.parse_args(argv)
    verbose = not args.quiet

    if not os.path.isdir(args.directory):
        print(f"Error: directory '{args.directory}' not found", file=sys.stderr)
        return 1

    txt_files = sorted(glob.glob(os.path.join(args.directory, "*.txt")))
    if not txt_files and not args.random_records:
        print(f"Error: no .txt files found in '{args.directory}'",
              file=sys.stderr)
        return 1

    all_results = []
    with RecordCompressor(workers=args.workers, matcher=args.matcher,
                          verbose=verbose) as compressor:
        for i, file_path in enumerate(txt_files, 1):
            if verbose:
                print(f"[{i}/{len(txt_files)}] {os.path.basename(file_path)}",
                      file=sys.stderr)
            all_results.append(benchmark_file(
                file_path, compressor, args.record_size, verbose))

        if args.random_records:
            data = random_records(args.random_records, args.record_size)
            all_results.append(benchmark_bytes(
                "random", data, compressor, args.record_size, verbose))

    with open(args.output, 'w') as f:
        json.dump(all_results, f, indent=2)

    failed = [r['filename'] for r in all_results
              if not r['compressors']['palmdoc']['lossless']]
    if verbose:
        print(f"Results saved to: {args.output}", file=sys.stderr)
    if failed:
        print(f"Lossless check FAILED for: {', '.join(failed)}",
              file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
