"""Tests for the bcr read / blocks commands with stub decoders."""

import argparse
import io
import json
import logging
from functools import partial
from unittest.mock import patch

import pytest
from PIL import Image

import bcr
from cli.read import build_reader_config
from conftest import StubDecoder, StubProvider, symbol
from detection import read_batch


def write_png(path, size=(64, 48)):
    buf = io.BytesIO()
    Image.new("RGB", size, (255, 255, 255)).save(buf, format="PNG")
    path.write_bytes(buf.getvalue())
    return path


def read_args(**overrides):
    """Namespace as parsed for `bcr read` with no options given."""
    values = {"config": None, "block": None, "mode": None, "try_harder": False}
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture
def stub_decoders():
    """Route cmd_read through stub decoders; yields the stubs by name."""
    stubs = {
        "zxing": StubDecoder("zxing", [symbol("HELLO", "QRCode")]),
        "zbar": StubDecoder("zbar", [symbol("HELLO", "QRCODE")]),
        "opencv": StubDecoder("opencv"),
    }
    provider = StubProvider(*stubs.values())
    with patch("cli.read.read_batch", partial(read_batch, decoder_provider=provider)):
        yield stubs


class TestRead:
    def test_single_image_prints_flat_list(self, tmp_path, stub_decoders, capsys):
        image = write_png(tmp_path / "one.png")

        assert bcr.main(["-q", "read", str(image), "-b", "zxing", "-b", "zbar:otsu"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert len(results) == 1
        assert results[0]["value"] == "HELLO"
        assert results[0]["format"] == "QRCode"
        assert results[0]["detectedBy"] == ["zxing_original", "zbar_otsu"]
        assert set(results[0]["box"]) == {"angle", "center", "size"}

    def test_several_images_print_nested_list(self, tmp_path, stub_decoders, capsys):
        a = write_png(tmp_path / "a.png")
        b = write_png(tmp_path / "b.png")

        assert bcr.main(["-q", "read", str(a), str(b), "-b", "zxing"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert len(results) == 2
        assert all(len(per_image) == 1 for per_image in results)

    def test_directory_expanded(self, tmp_path, stub_decoders, capsys):
        write_png(tmp_path / "a.png")
        write_png(tmp_path / "b.jpg")
        (tmp_path / "notes.txt").write_text("ignored")

        assert bcr.main(["-q", "read", str(tmp_path), "-b", "zxing", "--with-source"]) == 0

        results = json.loads(capsys.readouterr().out)
        assert [r["source"].rsplit("/", 1)[-1] for r in results] == ["a.png", "b.jpg"]

    def test_sequential_mode(self, tmp_path, stub_decoders, capsys):
        image = write_png(tmp_path / "one.png")

        args = ["-q", "read", str(image), "-b", "opencv", "-b", "zxing", "-b", "zbar",
                "--mode", "sequential"]
        assert bcr.main(args) == 0

        results = json.loads(capsys.readouterr().out)
        assert results[0]["detectedBy"] == ["zxing_original"]
        assert stub_decoders["zbar"].calls == []

    def test_try_harder_applies_to_zxing_blocks(self, tmp_path, stub_decoders):
        image = write_png(tmp_path / "one.png")

        bcr.main(["-q", "read", str(image), "-b", "zxing", "-b", "zbar", "--try-harder"])

        assert stub_decoders["zxing"].calls[0][1] == {"try_harder": True}
        assert stub_decoders["zbar"].calls[0][1] == {}

    def test_try_harder_applies_to_config_blocks(self, tmp_path):
        config_path = tmp_path / "reader.yaml"
        config_path.write_text(
            "blocks:\n"
            "  - decoder: zxing\n"
            "    options:\n"
            "      formats: [QRCode]\n"
            "  - decoder: zbar\n"
        )

        reader_config = build_reader_config(read_args(config=config_path, try_harder=True))

        assert dict(reader_config.blocks[0].options) == {"formats": ["QRCode"], "try_harder": True}
        assert dict(reader_config.blocks[1].options) == {}

    def test_try_harder_applies_to_default_blocks(self):
        reader_config = build_reader_config(read_args(try_harder=True))

        zxing_blocks = [b for b in reader_config.blocks if b.decoder == "zxing"]
        assert zxing_blocks
        assert all(b.options["try_harder"] is True for b in zxing_blocks)

    def test_try_harder_without_zxing_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cli.read"):
            build_reader_config(read_args(block=["zbar"], try_harder=True))
        assert "--try-harder has no effect" in caplog.text

    def test_config_file(self, tmp_path, stub_decoders, capsys):
        image = write_png(tmp_path / "one.png")
        config_path = tmp_path / "reader.yaml"
        config_path.write_text("mode: sequential\nblocks:\n  - decoder: zbar\n")

        assert bcr.main(["-q", "read", str(image), "--config", str(config_path)]) == 0

        results = json.loads(capsys.readouterr().out)
        assert results[0]["detectedBy"] == ["zbar_original"]
        assert stub_decoders["zxing"].calls == []

    def test_output_file(self, tmp_path, stub_decoders):
        image = write_png(tmp_path / "one.png")
        out = tmp_path / "results.json"

        assert bcr.main(["-q", "read", str(image), "-b", "zxing", "-o", str(out)]) == 0
        assert json.loads(out.read_text())[0]["value"] == "HELLO"

    def test_unknown_decoder_fails(self, tmp_path, stub_decoders):
        image = write_png(tmp_path / "one.png")
        assert bcr.main(["-q", "read", str(image), "-b", "quagga"]) == 1

    def test_corrupt_image_fails_batch(self, tmp_path, stub_decoders, capsys):
        good = write_png(tmp_path / "good.png")
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"not a png")

        assert bcr.main(["-q", "read", str(good), str(bad), "-b", "zxing"]) == 1
        assert capsys.readouterr().out == ""

    def test_missing_path_fails(self, tmp_path, stub_decoders):
        assert bcr.main(["-q", "read", str(tmp_path / "missing.png")]) == 1

    def test_empty_directory_fails(self, tmp_path, stub_decoders):
        assert bcr.main(["-q", "read", str(tmp_path)]) == 1


def test_blocks_lists_registry(capsys):
    assert bcr.main(["blocks"]) == 0
    out = capsys.readouterr().out
    for name in ("zbar", "zxing", "opencv", "original", "histogram", "otsu"):
        assert name in out
    assert "grayscale -> equalize_histogram" in out
