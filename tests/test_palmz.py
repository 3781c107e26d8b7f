import pytest

from palmdoc import compress
from palmz import main

TEXT = (b"PalmDoc records hold up to 4096 bytes of text. "
        b"Records compress on their own. \x01\x02\xfe\xff ") * 50


def test_compress_decompress_files(tmp_path):
    src = tmp_path / "in.txt"
    packed = tmp_path / "in.pdz"
    restored = tmp_path / "out.txt"
    src.write_bytes(TEXT)

    main(["-q", "c", str(src), str(packed), "--matcher", "hash"])
    assert packed.read_bytes() == compress(TEXT)

    main(["-q", "d", str(packed), str(restored)])
    assert restored.read_bytes() == TEXT


def test_strict_decompress_fails(tmp_path, capsys):
    packed = tmp_path / "bad.pdz"
    packed.write_bytes(b"abc\x80")
    with pytest.raises(SystemExit) as exc:
        main(["-q", "d", "--strict", str(packed), str(tmp_path / "out")])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_missing_input(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["-q", "c", str(tmp_path / "missing"), str(tmp_path / "out")])
    assert exc.value.code == 1


def test_inspect(tmp_path, capsys):
    packed = tmp_path / "t.pdz"
    packed.write_bytes(b"a\xc1\x02\x80\x81" + b"\x80\x10")
    main(["inspect", str(packed)])
    out = capsys.readouterr().out
    assert "pair" in out
    assert "distance=2 length=3" in out
    assert "Tokens: 4" in out


def test_benchmark(tmp_path, capsys):
    src = tmp_path / "book.txt"
    src.write_bytes(TEXT)
    main(["-q", "benchmark", str(src), "--workers", "1",
          "--record-size", "1024"])
    out = capsys.readouterr().out
    assert "Lossless: PASS" in out
    assert "palmdoc" in out


def test_no_command(capsys):
    with pytest.raises(SystemExit):
        main([])
