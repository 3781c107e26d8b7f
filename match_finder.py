"""
Back-reference search for the PalmDoc compressor.

Both finders answer the same question for a cursor position `pos`: which is
the longest chunk data[pos:pos+L] (L from 10 down to 3) that occurs earlier,
fully before `pos` and starting at index 1 or later, at a distance of at most
2047? Among equal lengths the nearest occurrence wins.

  linear -- the reference scan: one bytes.rfind per candidate length.
            O(n) per call, O(n^2) worst case per buffer.
  hash   -- chains of earlier positions keyed by their 3-byte prefix,
            walked nearest-first and cut off at the window edge.

The two produce identical answers, so compressed output does not depend on
the finder in use.
"""
from collections import defaultdict

MIN_MATCH = 3
MAX_MATCH = 10
MAX_DISTANCE = 2047

# Index 0 is never a back-reference source
FIRST_CANDIDATE = 1


def find_match_linear(data: bytes, pos: int):
    """Return (distance, length) of the best earlier match, or None."""
    for length in range(min(MAX_MATCH, len(data) - pos), MIN_MATCH - 1, -1):
        j = data.rfind(data[pos:pos + length], FIRST_CANDIDATE, pos)
        if j >= FIRST_CANDIDATE and pos - j <= MAX_DISTANCE:
            return pos - j, length
    return None


class HashChainMatcher:
    """Incremental hash-chain finder over a single input buffer.

    Positions are indexed lazily, so `find` must be called with
    non-decreasing positions.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.chains = defaultdict(list)
        self._next_index = FIRST_CANDIDATE

    def _index_until(self, pos):
        # A source must end at or before pos, so only starts <= pos - 3 count
        stop = pos - MIN_MATCH + 1
        data = self.data
        chains = self.chains
        for j in range(self._next_index, stop):
            chains[data[j:j + MIN_MATCH]].append(j)
        if stop > self._next_index:
            self._next_index = stop

    def find(self, pos: int):
        """Return (distance, length) of the best earlier match, or None."""
        self._index_until(pos)
        data = self.data
        chain = self.chains.get(data[pos:pos + MIN_MATCH])
        if not chain:
            return None

        lowest = max(FIRST_CANDIDATE, pos - MAX_DISTANCE)
        best_len = 0
        best_dist = 0
        for j in reversed(chain):
            if j < lowest:
                break
            dist = pos - j
            # The source may not run into the bytes being encoded
            limit = min(MAX_MATCH, dist, len(data) - pos)
            if limit <= best_len:
                continue
            n = MIN_MATCH
            while n < limit and data[j + n] == data[pos + n]:
                n += 1
            if n > best_len:
                best_len = n
                best_dist = dist
                if n == MAX_MATCH:
                    break

        if best_len < MIN_MATCH:
            return None
        return best_dist, best_len


MATCHERS = ("linear", "hash")


def make_finder(data: bytes, matcher: str = "linear"):
    """Return a callable pos -> (distance, length) | None for `data`."""
    if matcher == "linear":
        return lambda pos: find_match_linear(data, pos)
    elif matcher == "hash":
        return HashChainMatcher(data).find
    raise ValueError(f"Unknown matcher: {matcher!r} "
                     f"(expected one of {', '.join(MATCHERS)})")
