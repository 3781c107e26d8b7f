import numpy as np
import pytest

from match_finder import (
    MAX_DISTANCE,
    HashChainMatcher,
    find_match_linear,
    make_finder,
)
from palmdoc import compress

CHUNK = b"ABCDEFGHIJ"


def _both(data, pos):
    return find_match_linear(data, pos), HashChainMatcher(data).find(pos)


def test_longest_match_wins():
    data = b"-" + CHUNK + b"-----" + CHUNK + b"-" * 15
    assert _both(data, 16) == ((15, 10), (15, 10))


def test_nearest_match_wins_on_equal_length():
    data = b"-abc-abc-abc--" + b"-" * 15
    # "abc-" repeats at distances 4 and 8; the nearer one is taken
    assert _both(data, 9) == ((4, 4), (4, 4))


def test_longer_far_match_beats_shorter_near_match():
    data = b"-abcdefghx-abcX--abcdefgh" + b"-" * 15
    pos = data.rindex(b"abcdefgh")
    linear, hashed = _both(data, pos)
    assert linear == hashed == (pos - 1, 8)


def test_index_zero_is_skipped():
    data = CHUNK + b"-----" + CHUNK + b"-" * 15
    assert _both(data, 15) == (None, None)


def test_window_limit():
    data = b"-" + CHUNK + b"-" * (MAX_DISTANCE - 10) + CHUNK + b"-" * 15
    assert _both(data, 1 + MAX_DISTANCE) == ((MAX_DISTANCE, 10),
                                            (MAX_DISTANCE, 10))
    data = b"-" + CHUNK + b"-" * (MAX_DISTANCE - 9) + CHUNK + b"-" * 15
    assert _both(data, 2 + MAX_DISTANCE) == (None, None)


def test_source_does_not_overlap_cursor():
    # "aaaa..." only matches itself at a distance >= the chunk length
    data = b"-" + b"a" * 30
    assert _both(data, 5) == ((4, 4), (4, 4))


def test_hash_matcher_is_incremental():
    data = b"-abcdef-" * 40
    finder = HashChainMatcher(data)
    for pos in range(11, len(data) - 11):
        assert finder.find(pos) == find_match_linear(data, pos)


@pytest.mark.parametrize("seed", range(6))
def test_hash_and_linear_compress_identically(seed):
    rng = np.random.default_rng(seed)
    alphabet = np.frombuffer(b"abcd \x01\x90Q", dtype=np.uint8)
    data = rng.choice(alphabet, size=4096).tobytes()
    assert compress(data, matcher="hash") == compress(data, matcher="linear")


def test_hash_and_linear_on_long_text():
    words = [b"palm", b"doc", b"record", b"the", b"of", b"text", b"mobi"]
    rng = np.random.default_rng(7)
    data = b" ".join(words[i] for i in rng.integers(0, len(words), 3000))
    assert compress(data, matcher="hash") == compress(data, matcher="linear")


def test_make_finder_rejects_unknown_name():
    with pytest.raises(ValueError):
        make_finder(b"", "lz4")
