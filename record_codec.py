"""
Parallel PalmDoc coding of independent records.

A PalmDOC/MOBI text section is a list of records (usually 4096 bytes of
plaintext each) that compress independently of one another. RecordCompressor
fans such a list out over a ProcessPoolExecutor and returns the results in
input order. Slicing the text into records is the caller's job.
"""
import sys
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from multiprocessing import cpu_count

from tqdm import tqdm

from match_finder import MATCHERS
from palmdoc import DEFAULT_MATCHER, compress, decompress

# Records handed to a worker per round trip
DEFAULT_CHUNKSIZE = 16


class RecordCompressor:
    """Compress and decompress lists of records on a process pool.

    With workers=1 everything runs in the calling process and no pool is
    created.
    """

    def __init__(self, workers=None, matcher=DEFAULT_MATCHER, verbose=True):
        """Initialize the compressor.

        Args:
            workers: Number of worker processes (default: cpu_count()).
            matcher: Back-reference finder, "linear" or "hash".
            verbose: Print progress information.
        """
        if matcher not in MATCHERS:
            raise ValueError(f"Unknown matcher: {matcher!r}")
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self.verbose = verbose
        self.matcher = matcher
        self._num_workers = workers if workers else cpu_count()
        self._pool = None

        if self._num_workers > 1:
            if self.verbose:
                print(f"Creating ProcessPoolExecutor: {self._num_workers} "
                      f"workers (cpu_count={cpu_count()})", file=sys.stderr)
            self._pool = ProcessPoolExecutor(max_workers=self._num_workers)

    @property
    def workers(self):
        return self._num_workers

    def _map(self, fn, records, desc):
        records = [bytes(r) for r in records]
        if self._pool is None:
            results = map(fn, records)
        else:
            results = self._pool.map(fn, records, chunksize=DEFAULT_CHUNKSIZE)
        return list(tqdm(results, total=len(records), desc=desc, unit="rec",
                         disable=not self.verbose, file=sys.stderr))

    def compress_records(self, records):
        """Compress each record; returns a list of token streams."""
        return self._map(partial(compress, matcher=self.matcher), records,
                         "Compressing")

    def decompress_records(self, records, strict=False):
        """Decompress each token stream; returns a list of byte strings."""
        return self._map(partial(decompress, strict=strict), records,
                         "Decompressing")

    def shutdown(self):
        """Shutdown the process pool."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False
