from __future__ import annotations

import io

import pandas as pd

from text_import import cli


def test_products_csv_to_stdout(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("* Creams (2 SKUs)\nShea Butter, Squalane\n"))
    assert cli.main(["products"]) == 0
    df = pd.read_csv(io.StringIO(capsys.readouterr().out))
    assert df["name"].tolist() == ["Creams"]
    assert df["ingredients"].tolist() == ["Shea Butter, Squalane"]
    assert df["description"].tolist() == ["2 SKUs"]


def test_countries_to_output_file(tmp_path) -> None:
    src = tmp_path / "countries.txt"
    src.write_text("Egypt (EG)\n- EDA Registration\n", encoding="utf-8")
    out = tmp_path / "countries.csv"
    assert cli.main(["countries", "--input", str(src), "--output", str(out)]) == 0
    df = pd.read_csv(out)
    assert df[["name", "code", "documents"]].values.tolist() == [["Egypt", "EG", "EDA Registration"]]


def test_nothing_parsed_exits_with_hint(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("no structure here"))
    assert cli.main(["products"]) == 1
    assert "* Category (N SKUs)" in capsys.readouterr().err
