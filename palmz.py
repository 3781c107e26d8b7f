#!/usr/bin/env python3
"""
palmz -- command line front end for the PalmDoc codec.

Files are coded as a single token stream; PalmDoc itself has no framing, so
`d` only inverts what `c` produced from the same file. The benchmark cuts its
input into 4096-byte records the way PalmDOC/MOBI containers do.

Usage:
    palmz.py c INPUT OUTPUT [--matcher linear|hash]
    palmz.py d INPUT OUTPUT [--strict]
    palmz.py inspect INPUT [--limit N]
    palmz.py benchmark INPUT [--record-size 4096] [--workers N]
    palmz.py charts RESULTS [--output-dir assets]

Requirements:
    pip install numpy tqdm matplotlib
"""

import argparse
import sys
import time

from benchmark_records import DEFAULT_RECORD_SIZE, benchmark_file
from match_finder import MATCHERS
from palmdoc import (
    DEFAULT_MATCHER,
    TOKEN_BACKREF,
    TOKEN_PAIR,
    TOKEN_RUN,
    compress,
    decompress,
    iter_tokens,
)
from record_codec import RecordCompressor


def fmt(num_bytes):
    if num_bytes < 1024:
        return f"{num_bytes} B"
    elif num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    else:
        return f"{num_bytes / (1024 * 1024):.2f} MB"


def cmd_compress(args):
    with open(args.input, "rb") as f:
        data = f.read()

    original_size = len(data)
    if not args.quiet:
        print(f"Input:  {args.input} ({fmt(original_size)})", file=sys.stderr)

    t0 = time.time()
    compressed = compress(data, matcher=args.matcher)
    elapsed = time.time() - t0

    with open(args.output, "wb") as f:
        f.write(compressed)

    comp_size = len(compressed)
    ratio = comp_size / original_size if original_size > 0 else 0
    bpb = (comp_size * 8) / original_size if original_size > 0 else 0

    if not args.quiet:
        print(f"Output: {args.output} ({fmt(comp_size)})", file=sys.stderr)
        print(f"Ratio:  {ratio:.4f} ({100*ratio:.1f}%)  "
              f"{bpb:.4f} bits/byte  {elapsed:.2f}s", file=sys.stderr)


def cmd_decompress(args):
    with open(args.input, "rb") as f:
        data = f.read()

    if not args.quiet:
        print(f"Input:  {args.input} ({fmt(len(data))})", file=sys.stderr)

    t0 = time.time()
    result = decompress(data, strict=args.strict)
    elapsed = time.time() - t0

    with open(args.output, "wb") as f:
        f.write(result)

    if not args.quiet:
        print(f"Output: {args.output} ({fmt(len(result))})", file=sys.stderr)
        print(f"Time:   {elapsed:.2f}s", file=sys.stderr)


def cmd_inspect(args):
    with open(args.input, "rb") as f:
        data = f.read()

    counts = {}
    for n, token in enumerate(iter_tokens(data)):
        counts[token.kind] = counts.get(token.kind, 0) + 1
        if args.limit is not None and n >= args.limit:
            continue
        if token.kind == TOKEN_BACKREF:
            detail = f"distance={token.distance} length={token.length}"
        elif token.kind == TOKEN_PAIR:
            detail = f"' ' + {chr(token.raw[0] ^ 0x80)!r}"
        elif token.kind == TOKEN_RUN:
            detail = f"{token.length} raw bytes"
        else:
            detail = repr(token.raw)
        print(f"{token.offset:>8}  {token.kind:<9} {token.raw.hex():<18} "
              f"{detail}")

    summary = ", ".join(f"{kind}={count}" for kind, count
                        in sorted(counts.items()))
    print(f"Tokens: {sum(counts.values())} ({summary})")


def cmd_benchmark(args):
    with RecordCompressor(workers=args.workers, matcher=args.matcher,
                          verbose=not args.quiet) as comp:
        result = benchmark_file(args.input, comp,
                                record_size=args.record_size, verbose=False)

    original_size = result['original_size']
    print(f"File: {args.input} ({fmt(original_size)}, "
          f"{result['records']} records of {args.record_size})")
    print(f"{'='*70}")

    print(f"\n{'Method':<12} {'Size':>10} {'Ratio':>8} {'bits/B':>8} {'Time':>8}")
    print(f"{'-'*12} {'-'*10} {'-'*8} {'-'*8} {'-'*8}")
    print(f"{'original':<12} {fmt(original_size):>10}")

    for name, label in (("gzip", "gzip -9"), ("lzma", "lzma -9"),
                        ("palmdoc", "palmdoc")):
        r = result['compressors'][name]
        print(f"{label:<12} {fmt(r['size']):>10} {r['ratio']:>7.1%} "
              f"{r['bpb']:>7.4f} {r['time']:>7.2f}s")

    palm = result['compressors']['palmdoc']
    if 'record_ratio_mean' in palm:
        print(f"\nRecord ratio: mean {palm['record_ratio_mean']:.1%}  "
              f"min {palm['record_ratio_min']:.1%}  "
              f"max {palm['record_ratio_max']:.1%}")
    print(f"\nLossless: {'PASS' if palm['lossless'] else 'FAIL'}")
    if not palm['lossless']:
        sys.exit(1)


def cmd_charts(args):
    from generate_ratio_charts import load_results, render_charts
    render_charts(load_results(args.results), args.output_dir,
                  verbose=not args.quiet)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="palmz",
        description="PalmDoc (PalmDOC/MOBI) compression codec")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Suppress progress output")

    sub = parser.add_subparsers(dest="command")

    # c / compress
    p_c = sub.add_parser("c", aliases=["compress"], help="Compress a file")
    p_c.add_argument("input", help="Input file")
    p_c.add_argument("output", help="Output compressed file")
    p_c.add_argument("--matcher", choices=MATCHERS, default=DEFAULT_MATCHER,
                     help="Back-reference search (output is identical)")

    # d / decompress
    p_d = sub.add_parser("d", aliases=["decompress"],
                         help="Decompress a file")
    p_d.add_argument("input", help="Input compressed file")
    p_d.add_argument("output", help="Output restored file")
    p_d.add_argument("--strict", action="store_true",
                     help="Fail on truncated or invalid tokens")

    # inspect
    p_i = sub.add_parser("inspect", aliases=["i"],
                         help="List the tokens of a compressed file")
    p_i.add_argument("input", help="Input compressed file")
    p_i.add_argument("--limit", type=int, default=None,
                     help="Print at most N tokens (all are counted)")

    # benchmark
    p_b = sub.add_parser("benchmark", aliases=["b"],
                         help="Compare against gzip/lzma")
    p_b.add_argument("input", help="Input file")
    p_b.add_argument("--record-size", type=int, default=DEFAULT_RECORD_SIZE)
    p_b.add_argument("--workers", type=int, default=None,
                     help="Worker processes (default: cpu_count)")
    p_b.add_argument("--matcher", choices=MATCHERS, default=DEFAULT_MATCHER)

    # charts
    p_ch = sub.add_parser("charts",
                          help="Render charts from benchmark_records.py JSON")
    p_ch.add_argument("results", help="JSON results file")
    p_ch.add_argument("--output-dir", default="assets")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command in ("c", "compress"):
            cmd_compress(args)
        elif args.command in ("d", "decompress"):
            cmd_decompress(args)
        elif args.command in ("inspect", "i"):
            cmd_inspect(args)
        elif args.command in ("benchmark", "b"):
            cmd_benchmark(args)
        elif args.command == "charts":
            cmd_charts(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
