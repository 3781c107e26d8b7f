"""
PalmDoc codec: the LZ77-style compression used by PalmDOC / MOBI text records.

Token grammar (leading byte decides the variant):
  0x01-0x08  binary run -- that many raw bytes follow
  0x00       literal
  0x09-0x7F  literal
  0x80-0xBF  back-reference -- two bytes, 11-bit distance + 3-bit length
  0xC0-0xFF  space + (byte ^ 0x80)

The compressor is the greedy reference encoder: at each position it tries a
back-reference (lengths 10 down to 3, nearest occurrence first), then a
space+ASCII pair, then a literal, then a binary run. Index 0 is never a copy
source, so input that repeats its first bytes can encode differently from
encoders that allow it; either stream decodes the same.

The decompressor is tolerant by default: a truncated final token stops the
decode and an out-of-range back-reference is skipped. With strict=True those
cases raise DecompressError subclasses instead.

Allocation failure surfaces as MemoryError; an empty result only ever means
there was nothing to decode.
"""
from collections import namedtuple

from match_finder import (
    MAX_DISTANCE,
    MAX_MATCH,
    MIN_MATCH,
    make_finder,
)

# ---- token grammar ----
RUN_MIN = 0x01
RUN_MAX = 0x08
BACKREF_MIN = 0x80
PAIR_MIN = 0xC0
SPACE = 0x20

# Bytes that pass through unchanged
LITERAL_BYTES = frozenset(range(0x09, 0x80)) | {0x00}
# Bytes that may follow a space and fold into one 0xC0-0xFF token
PAIRABLE_BYTES = frozenset(range(0x40, 0x80))

DEFAULT_MATCHER = "linear"

TOKEN_LITERAL = "literal"
TOKEN_RUN = "run"
TOKEN_PAIR = "pair"
TOKEN_BACKREF = "backref"
TOKEN_TRUNCATED = "truncated"

Token = namedtuple("Token", ["kind", "offset", "raw", "distance", "length"])


class PalmDocError(ValueError):
    """Base class for codec errors."""


class DecompressError(PalmDocError):
    """A token stream could not be decoded in strict mode."""


class TruncatedStreamError(DecompressError):
    """The stream ends inside a binary run or a back-reference."""


class InvalidDistanceError(DecompressError):
    """A back-reference points before the start of the output."""


# ==================================================================
# Token helpers
# ==================================================================

def encode_backref(distance, length):
    """Pack a back-reference into its two-byte token."""
    if not 1 <= distance <= MAX_DISTANCE:
        raise PalmDocError(f"distance {distance} outside 1..{MAX_DISTANCE}")
    if not MIN_MATCH <= length <= MAX_MATCH:
        raise PalmDocError(f"length {length} outside {MIN_MATCH}..{MAX_MATCH}")
    compound = (distance << 3) | (length - MIN_MATCH)
    return bytes((BACKREF_MIN | ((compound >> 8) & 0xFF), compound & 0xFF))


def decode_backref(high, low):
    """Split a back-reference token into (distance, length)."""
    field = ((high << 8) | low) & 0x3FFF
    return field >> 3, (field & 0x07) + MIN_MATCH


def compress_bound(size):
    """Largest possible compressed size for `size` input bytes.

    The worst case alternates a one-byte binary run (2 output bytes) with a
    literal (1 output byte).
    """
    return size + size // 2 + 1


def decompress_bound(size):
    """Largest possible decompressed size for `size` token bytes."""
    return size * (MAX_MATCH // 2)


# ==================================================================
# Compression
# ==================================================================

def compress_into(data, out, matcher=DEFAULT_MATCHER):
    """Append the PalmDoc encoding of `data` to bytearray `out`.

    Returns the number of bytes appended.
    """
    data = bytes(data)
    find_match = make_finder(data, matcher)
    start = len(out)
    n = len(data)
    i = 0

    while i < n:
        # Back-references need MAX_MATCH bytes of slack on both sides
        if i > MAX_MATCH and n - i > MAX_MATCH:
            match = find_match(i)
            if match is not None:
                distance, length = match
                out += encode_backref(distance, length)
                i += length
                continue

        c = data[i]
        if c == SPACE and i + 1 < n and data[i + 1] in PAIRABLE_BYTES:
            out.append(data[i + 1] ^ 0x80)
            i += 2
        elif c in LITERAL_BYTES:
            out.append(c)
            i += 1
        else:
            end = min(i + RUN_MAX, n)
            j = i + 1
            while j < end and data[j] not in LITERAL_BYTES:
                j += 1
            out.append(j - i)
            out += data[i:j]
            i = j

    return len(out) - start


def compress(data, matcher=DEFAULT_MATCHER):
    """Compress a byte string into a PalmDoc token stream."""
    out = bytearray()
    compress_into(data, out, matcher=matcher)
    return bytes(out)


# ==================================================================
# Decompression
# ==================================================================

def decompress_into(data, out, strict=False):
    """Decode token stream `data`, appending the result to bytearray `out`.

    A single 0x00 sentinel is appended after the decoded bytes. The return
    value is the decoded length and does not count the sentinel.
    """
    data = bytes(data)
    start = len(out)
    n = len(data)
    i = 0

    while i < n:
        c = data[i]
        i += 1
        if RUN_MIN <= c <= RUN_MAX:
            if strict and i + c > n:
                raise TruncatedStreamError(
                    f"binary run of {c} at offset {i - 1} has only "
                    f"{n - i} bytes left")
            out += data[i:i + c]
            i += c
        elif c < BACKREF_MIN:
            out.append(c)
        elif c >= PAIR_MIN:
            out.append(SPACE)
            out.append(c ^ 0x80)
        else:
            if i >= n:
                if strict:
                    raise TruncatedStreamError(
                        f"back-reference at offset {i - 1} is missing its "
                        f"second byte")
                break
            distance, length = decode_backref(c, data[i])
            i += 1
            produced = len(out) - start
            if distance == 0 or distance > produced:
                if strict:
                    raise InvalidDistanceError(
                        f"back-reference at offset {i - 2} has distance "
                        f"{distance} with {produced} bytes decoded")
                continue
            if distance >= length:
                pos = len(out) - distance
                out += out[pos:pos + length]
            else:
                # Overlapping copy repeats the last `distance` bytes
                for _ in range(length):
                    out.append(out[-distance])

    decoded = len(out) - start
    out.append(0)
    return decoded


def decompress(data, strict=False):
    """Decompress a PalmDoc token stream back into bytes."""
    out = bytearray()
    decoded = decompress_into(data, out, strict=strict)
    del out[decoded:]
    return bytes(out)


def iter_tokens(data):
    """Yield the Token records of a stream without decoding it."""
    data = bytes(data)
    n = len(data)
    i = 0
    while i < n:
        c = data[i]
        offset = i
        i += 1
        if RUN_MIN <= c <= RUN_MAX:
            if i + c > n:
                yield Token(TOKEN_TRUNCATED, offset, data[offset:], 0, n - i)
                return
            yield Token(TOKEN_RUN, offset, data[offset:i + c], 0, c)
            i += c
        elif c < BACKREF_MIN:
            yield Token(TOKEN_LITERAL, offset, data[offset:i], 0, 1)
        elif c >= PAIR_MIN:
            yield Token(TOKEN_PAIR, offset, data[offset:i], 0, 2)
        else:
            if i >= n:
                yield Token(TOKEN_TRUNCATED, offset, data[offset:], 0, 0)
                return
            distance, length = decode_backref(c, data[i])
            i += 1
            yield Token(TOKEN_BACKREF, offset, data[offset:i], distance, length)
