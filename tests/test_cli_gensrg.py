from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from apps.cli.main import app
from core.hashing.digest import hash_bytes

runner = CliRunner()


def _write_inputs(base: Path) -> tuple[Path, Path, Path]:
    table = base / "joined.srg"
    table.write_text("CL: 0 a net/a\nFD: 2 a/f net/a/g\n", encoding="utf-8")
    fields = base / "fields.csv"
    fields.write_text("searge,name\ng,renamed\n", encoding="utf-8")
    methods = base / "methods.csv"
    methods.write_text("searge,name\n", encoding="utf-8")
    return table, fields, methods


def _gensrg_args(table: Path, fields: Path, methods: Path, out_dir: Path) -> list[str]:
    return [
        "gensrg",
        "--in-srg",
        str(table),
        "--fields-csv",
        str(fields),
        "--methods-csv",
        str(methods),
        "--out-dir",
        str(out_dir),
    ]


def test_gensrg_writes_three_tables(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"

    result = runner.invoke(app, _gensrg_args(table, fields, methods, out_dir))

    assert result.exit_code == 0, result.output
    assert "DONE:" in result.output
    assert (out_dir / "obf_to_final.srg").read_text(encoding="utf-8") == (
        "CL: a net/a\nFD: a/f net/a/renamed\n"
    )
    assert (out_dir / "final_to_intermediate.srg").read_text(encoding="utf-8") == (
        "CL: net/a net/a\nFD: net/a/renamed net/a/g\n"
    )
    assert (out_dir / "final_to_obf.srg").read_text(encoding="utf-8") == (
        "CL: net/a a\nFD: net/a/renamed a/f\n"
    )


def test_gensrg_second_run_is_skipped(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"
    runner.invoke(app, _gensrg_args(table, fields, methods, out_dir))

    result = runner.invoke(app, _gensrg_args(table, fields, methods, out_dir))

    assert result.exit_code == 0
    assert "SKIPPED" in result.output


def test_gensrg_no_cache_always_runs(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"
    runner.invoke(app, _gensrg_args(table, fields, methods, out_dir))

    result = runner.invoke(app, [*_gensrg_args(table, fields, methods, out_dir), "--no-cache"])

    assert result.exit_code == 0
    assert "DONE:" in result.output


def test_gensrg_parse_error_returns_2(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    table.write_text("CL: 0 a net/a\nZZ: nonsense\n", encoding="utf-8")

    result = runner.invoke(app, _gensrg_args(table, fields, methods, tmp_path / "out"))

    assert result.exit_code == 2
    assert "Unknown record tag" in result.output
    assert ":2" in result.output


def test_gensrg_duplicate_dictionary_key_returns_2(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    fields.write_text("searge,name\ng,one\ng,two\n", encoding="utf-8")

    result = runner.invoke(app, _gensrg_args(table, fields, methods, tmp_path / "out"))

    assert result.exit_code == 2
    assert "Duplicate short name" in result.output


def test_gensrg_invalid_utf8_table_returns_2(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    table.write_bytes(b"CL: 0 a net/a\nCL: 0 b net/\xff\n")

    result = runner.invoke(app, _gensrg_args(table, fields, methods, tmp_path / "out"))

    assert result.exit_code == 2
    assert "ERROR: Invalid UTF-8" in result.output
    assert f"{table}:2" in result.output


def test_gensrg_invalid_utf8_dictionary_returns_2(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    fields.write_bytes(b"searge,name\ng,caf\xe9\n")

    result = runner.invoke(app, _gensrg_args(table, fields, methods, tmp_path / "out"))

    assert result.exit_code == 2
    assert "ERROR: Invalid UTF-8" in result.output
    assert f"{fields}:2" in result.output


def test_gensrg_requires_out_dir(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)

    result = runner.invoke(app, _gensrg_args(table, fields, methods, tmp_path / "out")[:-2])

    assert result.exit_code == 2
    assert not (tmp_path / "out").exists()
    assert list(tmp_path.rglob("*.srg")) == [table]


def test_gensrg_invalid_config_returns_1(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    config = tmp_path / "mapgate.yaml"
    config.write_text("cache: [\n", encoding="utf-8")

    result = runner.invoke(
        app, [*_gensrg_args(table, fields, methods, tmp_path / "out"), "--config", str(config)]
    )

    assert result.exit_code == 1
    assert "Invalid YAML" in result.output


def test_check_reports_run_then_skip(tmp_path: Path) -> None:
    table, fields, methods = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"
    check_args = ["check", *_gensrg_args(table, fields, methods, out_dir)[1:]]

    before = runner.invoke(app, check_args)
    runner.invoke(app, _gensrg_args(table, fields, methods, out_dir))
    after = runner.invoke(app, check_args)

    assert before.exit_code == 0
    assert "RUN: reason=output_missing" in before.output
    assert "SKIP: reason=up_to_date" in after.output


def test_hash_prints_one_token_per_file(tmp_path: Path) -> None:
    folder = tmp_path / "folder"
    folder.mkdir()
    (folder / "b.txt").write_bytes(b"b")
    (folder / "a.txt").write_bytes(b"a")

    result = runner.invoke(app, ["hash", str(folder)])

    assert result.exit_code == 0
    assert result.output.splitlines() == [hash_bytes(b"a"), hash_bytes(b"b")]
