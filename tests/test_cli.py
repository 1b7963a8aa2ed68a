"""Smoke tests for the command-line entry points."""

from __future__ import annotations

import pytest
from openpyxl import load_workbook

from salesview.cli import main

from conftest import SAMPLE_CSV


def _write_sample(tmp_path):
    path = tmp_path / "sales.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


def test_summary_prints_totals(tmp_path, capsys) -> None:
    main(["summary", str(_write_sample(tmp_path))])
    out = capsys.readouterr().out
    assert "2025 Sales:      $350.00" in out
    assert "Top division: FOOD" in out


def test_drilldown_with_filters(tmp_path, capsys) -> None:
    main(["drilldown", str(_write_sample(tmp_path)), "brands", "--divisions", "DRINKS"])
    out = capsys.readouterr().out
    assert "FIZZ" in out
    assert "ACME" not in out


def test_export_writes_workbook_and_csv(tmp_path) -> None:
    source = str(_write_sample(tmp_path))
    out_dir = tmp_path / "out"
    main(["export", source, "--output", str(out_dir)])
    main(["export", source, "--view", "lost_items", "--output", str(out_dir)])

    wb = load_workbook(out_dir / "Sales_Summary.xlsx")
    assert wb.sheetnames[:2] == ["Summary", "Divisions"]
    assert (out_dir / "lost_items.csv").read_text(encoding="utf-8").startswith("Item Code,Item Description,2024 Sales")


def test_unreadable_csv_exits_with_message(tmp_path, capsys) -> None:
    path = tmp_path / "sales.csv"
    path.write_bytes(b'DIVISION,"BRAND\n')
    with pytest.raises(SystemExit) as exc_info:
        main(["summary", str(path)])
    assert exc_info.value.code == 1
    assert "Failed to parse CSV data" in capsys.readouterr().out


def test_missing_file_exits_with_message(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["summary", str(tmp_path / "gone.csv")])
    assert exc_info.value.code == 1
    assert "Could not read" in capsys.readouterr().out
