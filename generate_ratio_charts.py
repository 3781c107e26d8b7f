#!/usr/bin/env python3
"""
Generate charts from PalmDoc record benchmark results.

Usage:
    python generate_ratio_charts.py benchmark_record_results.json --output-dir assets
"""
import argparse
import json
import os
import sys

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

# Dark theme colors
BG_COLOR = '#0D1117'
TEXT_COLOR = '#E6EDF3'
GRID_COLOR = '#30363D'
C_GZIP = '#6C8EBF'
C_LZMA = '#82B366'
C_PALMDOC = '#E04040'

METHODS = (('gzip', 'gzip -9', C_GZIP),
           ('lzma', 'lzma -9', C_LZMA),
           ('palmdoc', 'PalmDoc', C_PALMDOC))


def _apply_theme():
    plt.style.use('dark_background')
    plt.rcParams['figure.facecolor'] = BG_COLOR
    plt.rcParams['axes.facecolor'] = BG_COLOR
    plt.rcParams['axes.edgecolor'] = GRID_COLOR
    plt.rcParams['grid.color'] = GRID_COLOR
    plt.rcParams['text.color'] = TEXT_COLOR
    plt.rcParams['axes.labelcolor'] = TEXT_COLOR
    plt.rcParams['xtick.color'] = TEXT_COLOR
    plt.rcParams['ytick.color'] = TEXT_COLOR
    plt.rcParams['font.size'] = 10


def load_results(path):
    with open(path, 'r') as f:
        results = json.load(f)
    # Sort by original size
    return sorted(results, key=lambda r: r['original_size'])


def _labels(results):
    labels = []
    for r in results:
        name = r['filename'].replace('.txt', '')
        if len(name) > 20:
            name = name[:17] + '...'
        labels.append(name)
    return labels


def _grouped_bars(ax, results, key, fmt):
    x = np.arange(len(results))
    width = 0.25
    for offset, (method, label, color) in zip((-width, 0, width), METHODS):
        values = [r['compressors'][method][key] for r in results]
        if key == 'ratio':
            values = [v * 100 for v in values]
        bars = ax.bar(x + offset, values, width, label=label, color=color,
                      alpha=0.9)
        for bar in bars:
            height = bar.get_height()
            ax.text(bar.get_x() + bar.get_width() / 2., height,
                    fmt.format(height), ha='center', va='bottom', fontsize=7)
    ax.set_xticks(x)
    ax.set_xticklabels(_labels(results), rotation=45, ha='right', fontsize=9)
    ax.legend(loc='upper right', framealpha=0.9)
    ax.grid(True, alpha=0.3, axis='y')


def _save(fig, output_dir, name, verbose):
    path = os.path.join(output_dir, name)
    fig.tight_layout()
    fig.savefig(path, dpi=150, facecolor=BG_COLOR)
    plt.close(fig)
    if verbose:
        print(f"Generated: {path}", file=sys.stderr)
    return path


def render_charts(results, output_dir='assets', verbose=True):
    """Render all charts for `results`; returns the written paths."""
    if not results:
        raise ValueError("No benchmark results to plot")
    _apply_theme()
    os.makedirs(output_dir, exist_ok=True)
    paths = []

    # Chart 1: compression ratio per file
    fig, ax = plt.subplots(figsize=(14, 7))
    _grouped_bars(ax, results, 'ratio', '{:.1f}%')
    ax.set_ylabel('Compression Ratio (%)', fontsize=11, weight='bold')
    ax.set_title('Compression Ratio by File\n(Lower is Better)',
                 fontsize=13, weight='bold', pad=20)
    paths.append(_save(fig, output_dir, 'compression_ratio_by_file.png',
                       verbose))

    # Chart 2: bits per byte per file
    fig, ax = plt.subplots(figsize=(14, 7))
    _grouped_bars(ax, results, 'bpb', '{:.2f}')
    ax.set_ylabel('Bits Per Byte', fontsize=11, weight='bold')
    ax.set_title('Bits Per Byte by File\n(Lower is Better)',
                 fontsize=13, weight='bold', pad=20)
    paths.append(_save(fig, output_dir, 'bits_per_byte_by_file.png', verbose))

    # Chart 3: spread of per-record PalmDoc ratios
    spread = [r for r in results
              if 'record_ratio_mean' in r['compressors']['palmdoc']]
    if spread:
        fig, ax = plt.subplots(figsize=(12, 7))
        x = np.arange(len(spread))
        pd = [r['compressors']['palmdoc'] for r in spread]
        mean = np.array([p['record_ratio_mean'] for p in pd]) * 100
        low = mean - np.array([p['record_ratio_min'] for p in pd]) * 100
        high = np.array([p['record_ratio_max'] for p in pd]) * 100 - mean
        ax.errorbar(x, mean, yerr=[low, high], fmt='D', color=C_PALMDOC,
                    ecolor=TEXT_COLOR, capsize=5, markersize=8)
        ax.set_xticks(x)
        ax.set_xticklabels(_labels(spread), rotation=45, ha='right',
                           fontsize=9)
        ax.set_ylabel('Record Ratio (%)', fontsize=11, weight='bold')
        ax.set_title('PalmDoc Per-Record Ratio (min / mean / max)',
                     fontsize=13, weight='bold', pad=20)
        ax.grid(True, alpha=0.3)
        paths.append(_save(fig, output_dir, 'record_ratio_spread.png',
                           verbose))

    # Chart 4: PalmDoc throughput
    fig, ax = plt.subplots(figsize=(12, 7))
    x = np.arange(len(results))
    mb = np.array([r['original_size'] for r in results]) / (1024 * 1024)
    comp_t = np.array([r['compressors']['palmdoc']['time'] for r in results])
    decomp_t = np.array([r['compressors']['palmdoc']['decompress_time']
                         for r in results])
    width = 0.35
    ax.bar(x - width / 2, mb / np.maximum(comp_t, 1e-9), width,
           label='compress', color=C_PALMDOC, alpha=0.9)
    ax.bar(x + width / 2, mb / np.maximum(decomp_t, 1e-9), width,
           label='decompress', color=C_LZMA, alpha=0.9)
    ax.set_xticks(x)
    ax.set_xticklabels(_labels(results), rotation=45, ha='right', fontsize=9)
    ax.set_ylabel('Throughput (MB/s)', fontsize=11, weight='bold')
    ax.set_title('PalmDoc Throughput', fontsize=13, weight='bold', pad=20)
    ax.set_yscale('log')
    ax.legend(loc='upper right', framealpha=0.9)
    ax.grid(True, alpha=0.3, axis='y')
    paths.append(_save(fig, output_dir, 'palmdoc_throughput.png', verbose))

    return paths


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Render charts from benchmark_records.py output")
    parser.add_argument("results", nargs="?",
                        default="benchmark_record_results.json")
    parser.add_argument("--output-dir", default="assets")
    args = parser.parse_args(argv)

    render_charts(load_results(args.results), args.output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
