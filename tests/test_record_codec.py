import pytest

from palmdoc import compress
from record_codec import RecordCompressor

RECORDS = [
    b"",
    b" A",
    b"\x01\x02\x03" * 50,
    b"The quick brown fox jumps over the lazy dog. " * 80,
    bytes(range(256)) * 4,
]


def test_in_process_roundtrip():
    with RecordCompressor(workers=1, verbose=False) as comp:
        packed = comp.compress_records(RECORDS)
        assert packed == [compress(r) for r in RECORDS]
        assert comp.decompress_records(packed) == RECORDS


def test_pool_roundtrip_preserves_order():
    records = [bytes([i % 7 + 0x41]) * (i + 20) for i in range(60)]
    with RecordCompressor(workers=2, matcher="hash", verbose=False) as comp:
        assert comp.workers == 2
        packed = comp.compress_records(records)
        assert packed == [compress(r) for r in records]
        assert comp.decompress_records(packed) == records


def test_strict_decompress_records():
    with RecordCompressor(workers=1, verbose=False) as comp:
        assert comp.decompress_records([b"abc\x80"]) == [b"abc"]
        with pytest.raises(ValueError):
            comp.decompress_records([b"abc\x80"], strict=True)


def test_shutdown_is_idempotent():
    comp = RecordCompressor(workers=2, verbose=False)
    comp.shutdown()
    comp.shutdown()


@pytest.mark.parametrize("kwargs", [{"matcher": "zstd"}, {"workers": 0}])
def test_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        RecordCompressor(verbose=False, **kwargs)
