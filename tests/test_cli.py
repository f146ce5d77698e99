"""CLI argument parsing and the show/datasets commands."""
import json

import pytest

from bethyw.cli import (
    main,
    parse_areas_arg,
    parse_datasets_arg,
    parse_measures_arg,
    parse_years_arg,
)
from bethyw.data.datasets import DATASETS
from bethyw.data.errors import NotFoundError


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, (0, 0)),
        ("0", (0, 0)),
        ("0-0", (0, 0)),
        ("2010", (2010, 2010)),
        ("2010-2018", (2010, 2018)),
    ],
)
def test_parse_years_arg(value, expected):
    assert parse_years_arg(value) == expected


@pytest.mark.parametrize("value", ["201", "2010-", "2010-18", "abcd", "2010:2018"])
def test_parse_years_arg_invalid(value):
    with pytest.raises(ValueError, match="Invalid input for years argument"):
        parse_years_arg(value)


def test_parse_datasets_arg():
    assert parse_datasets_arg(None) == DATASETS
    assert parse_datasets_arg(["all"]) == DATASETS
    assert [d.code for d in parse_datasets_arg(["popden,biz"])] == ["popden", "biz"]

    with pytest.raises(NotFoundError, match="No dataset matches key: nope"):
        parse_datasets_arg(["nope"])


def test_parse_areas_and_measures_args():
    assert parse_areas_arg(None) == set()
    assert parse_areas_arg(["W1", "ALL"]) == set()
    assert parse_areas_arg(["W1,W2", "W3"]) == {"W1", "W2", "W3"}

    assert parse_measures_arg([]) == set()
    assert parse_measures_arg(["Pop", "DENS"]) == {"pop", "dens"}


def test_show_json(data_dir, capsys):
    code = main(["show", "--dir", str(data_dir), "-d", "complete-pop", "-a", "W06000023", "--json"])

    assert code == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc == {
        "W06000023": {
            "names": {"eng": "Powys", "cym": "Powys"},
            "measures": {"pop": {"1999": 5.0, "2000": 6.0, "2001": 7.0}},
        }
    }


def test_show_tables(data_dir, capsys):
    code = main(["show", "--dir", str(data_dir), "-d", "complete-pop", "popden", "-y", "2002"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Swansea / Abertawe (W06000011)" in out
    assert "Population density (dens)" not in out
    assert "population density (dens)" in out
    assert "<no measures>" in out


def test_show_skips_broken_dataset(data_dir, capsys):
    (data_dir / "econ0080.json").write_text("[1, 2")

    code = main(["show", "--dir", str(data_dir), "-d", "biz", "complete-pop", "-j"])

    assert code == 0
    doc = json.loads(capsys.readouterr().out)
    assert "pop" in doc["W06000011"]["measures"]


def test_show_missing_reference_table(tmp_path, capsys):
    code = main(["show", "--dir", str(tmp_path)])

    assert code == 1
    err = capsys.readouterr().err
    assert "Error importing dataset:" in err
    assert "Failed to open file" in err


def test_show_invalid_years(data_dir, capsys):
    code = main(["show", "--dir", str(data_dir), "-y", "20x0"])

    assert code == 1
    assert "Invalid input for years argument" in capsys.readouterr().err


def test_datasets_command(capsys):
    assert main(["datasets"]) == 0
    out = capsys.readouterr().out
    for dataset in DATASETS:
        assert dataset.code in out
