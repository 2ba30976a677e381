"""Integration tests for CLI file workflows."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from ayb64.cli import cli as cli_module

runner = CliRunner()
PLUGIN = Path(__file__).resolve().parents[3] / "examples" / "toml_format_plugin.py"


def test_encode_then_decode_file_round_trip(tmp_path: Path) -> None:
    """Encode a binary file to disk and decode it back byte-for-byte."""
    source = tmp_path / "blob.bin"
    source.write_bytes(bytes(range(256)) * 50)
    encoded = tmp_path / "blob.b64"
    restored = tmp_path / "restored.bin"

    enc = runner.invoke(
        cli_module.app,
        ["encode", str(source), "-o", str(encoded), "-w", "76", "-s", "-c", "4KB"],
    )
    dec = runner.invoke(cli_module.app, ["decode", str(encoded), "-o", str(restored), "-s"])

    assert enc.exit_code == 0, enc.output
    assert dec.exit_code == 0, dec.output
    assert all(len(line) <= 76 for line in encoded.read_text(encoding="utf-8").splitlines())
    assert restored.read_bytes() == source.read_bytes()


def test_encode_with_format_module(tmp_path: Path) -> None:
    """Render through a format registered from a plugin file."""
    source = tmp_path / "hello.txt"
    source.write_text("Hello", encoding="utf-8")

    result = runner.invoke(
        cli_module.app,
        ["encode", str(source), "-f", "toml", "--format-module", str(PLUGIN)],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith('[base64]\ndata = """\nSGVsbG8="""')


def test_formats_lists_plugin_formats() -> None:
    """List plugin formats next to the built-ins."""
    result = runner.invoke(cli_module.app, ["formats", "--format-module", str(PLUGIN)])

    assert result.exit_code == 0
    assert "toml" in result.output
    assert "application/toml" in result.output


def test_parity_on_decode_direction(tmp_path: Path) -> None:
    """Compare both modes when decoding a wrapped base64 file."""
    source = tmp_path / "data.b64"
    source.write_text("AAECAwQFBgcICQoL\nDA0ODw==\n", encoding="utf-8")

    result = runner.invoke(cli_module.app, ["parity", str(source), "--decode", "-c", "5"])

    assert result.exit_code == 0, result.output
    assert "Parity OK" in result.output
