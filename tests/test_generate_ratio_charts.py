import json
import os

import pytest

from benchmark_records import benchmark_bytes
from generate_ratio_charts import load_results, render_charts
from record_codec import RecordCompressor


def test_render_charts(tmp_path):
    with RecordCompressor(workers=1, verbose=False) as comp:
        results = [
            benchmark_bytes("small.txt", b"tiny text record " * 40, comp,
                            record_size=256, verbose=False),
            benchmark_bytes("large.txt", b"a larger sample of text " * 400,
                            comp, record_size=1024, verbose=False),
        ]
    path = tmp_path / "results.json"
    path.write_text(json.dumps(results))

    loaded = load_results(str(path))
    assert [r['filename'] for r in loaded] == ["small.txt", "large.txt"]

    paths = render_charts(loaded, str(tmp_path / "assets"), verbose=False)
    assert len(paths) == 4
    for p in paths:
        assert os.path.getsize(p) > 0


def test_render_charts_needs_results(tmp_path):
    with pytest.raises(ValueError):
        render_charts([], str(tmp_path), verbose=False)
