"""Tests for the allelejoin command line interface."""

from pathlib import Path

import polars as pl
from typer.testing import CliRunner

from allelejoin.cli import app

runner = CliRunner()

INFO_LINES = [
    '##INFO=<ID=DP,Number=1,Type=Integer,Description="Depth">',
    '##INFO=<ID=AF,Number=A,Type=Float,Description="Allele frequency">',
]


def test_fields_writes_tsv(write_vcf, tmp_path: Path):
    source = write_vcf(INFO_LINES)
    output = tmp_path / "out" / "fields.tsv"

    result = runner.invoke(app, ["fields", str(source), "--name", "SRC", "--output", str(output)])

    assert result.exit_code == 0, result.output
    frame = pl.read_csv(output, separator="\t")
    assert frame["name"].to_list() == ["SRC_AF", "SRC_DP"]
    assert frame["count_type"].to_list() == ["A", "FIXED"]


def test_fields_without_info(write_vcf):
    result = runner.invoke(app, ["fields", str(write_vcf([])), "--name", "SRC"])
    assert result.exit_code == 0
    assert "nothing to annotate" in " ".join(result.output.split())


def test_header_prints_renamed_lines(write_vcf):
    result = runner.invoke(app, ["header", str(write_vcf(INFO_LINES)), "-n", "SRC"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        '##INFO=<ID=SRC_AF,Number=A,Type=Float,Description="Allele frequency">',
        '##INFO=<ID=SRC_DP,Number=1,Type=Integer,Description="Depth">',
    ]


def test_invalid_source_exits_with_error(tmp_path: Path):
    result = runner.invoke(app, ["header", str(tmp_path / "missing.vcf"), "-n", "SRC"])
    assert result.exit_code == 1
