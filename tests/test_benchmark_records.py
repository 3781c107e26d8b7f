import json

import pytest

from benchmark_records import (
    benchmark_bytes,
    main,
    random_records,
    split_records,
)
from record_codec import RecordCompressor

TEXT = b"It was the best of times, it was the worst of times. " * 200


def test_split_records():
    records = split_records(b"x" * 10000, 4096)
    assert [len(r) for r in records] == [4096, 4096, 1808]
    assert split_records(b"", 4096) == []
    with pytest.raises(ValueError):
        split_records(b"abc", 0)


def test_random_records_is_deterministic():
    data = random_records(2, 128, seed=3)
    assert len(data) == 256
    assert data == random_records(2, 128, seed=3)


def test_benchmark_bytes():
    with RecordCompressor(workers=1, verbose=False) as comp:
        result = benchmark_bytes("text", TEXT, comp, record_size=1024,
                                 verbose=False)
    palm = result['compressors']['palmdoc']
    assert result['records'] == len(split_records(TEXT, 1024))
    assert palm['lossless'] is True
    assert palm['size'] < len(TEXT)
    assert palm['record_ratio_min'] <= palm['record_ratio_mean'] \
        <= palm['record_ratio_max']
    assert set(result['compressors']) == {'gzip', 'lzma', 'palmdoc'}


def test_main_writes_json(tmp_path):
    (tmp_path / "book.txt").write_bytes(TEXT)
    out = tmp_path / "results.json"
    rc = main([str(tmp_path), "--output", str(out), "--workers", "1",
               "--random-records", "1", "-q"])
    assert rc == 0
    results = json.loads(out.read_text())
    assert [r['filename'] for r in results] == ["book.txt", "random"]


def test_main_missing_directory(tmp_path):
    assert main([str(tmp_path / "nope"), "-q"]) == 1
