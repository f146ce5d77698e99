"""Loader: reference table first, then datasets, skipping broken files."""
import logging

import pytest

from bethyw.data.datasets import BIZ, COMPLETE_POP, POPDEN
from bethyw.data.errors import InvalidStreamError, NotFoundError
from bethyw.data.loader import import_dataset, load_all, load_areas, load_datasets
from bethyw.data.areas import Areas
from bethyw.data.schemas import ImportFilters


def test_load_all_imports_reference_table_and_datasets(data_dir):
    areas, loaded = load_all(data_dir, [COMPLETE_POP, POPDEN])

    assert loaded == ["complete-pop", "popden"]
    assert areas.codes() == ["W06000001", "W06000011", "W06000023", "W06000099"]
    assert areas.get_area("W06000011").get_measure("pop").get_value(1999) == 100.5


def test_load_all_applies_filters(data_dir):
    filters = ImportFilters.build(areas=["W06000011"], measures=["pop"], years=(2000, 2002))
    areas, _ = load_all(data_dir, [COMPLETE_POP, POPDEN], filters)

    assert areas.codes() == ["W06000011"]
    swansea = areas.get_area("W06000011")
    assert list(swansea.measures) == ["pop"]
    assert swansea.get_measure("pop").years() == [2000, 2001, 2002]


def test_missing_reference_table_is_fatal(tmp_path):
    with pytest.raises(InvalidStreamError, match="Failed to open file"):
        load_areas(Areas(), tmp_path)


def test_broken_dataset_is_skipped_and_logged(data_dir, caplog):
    (data_dir / "econ0080.json").write_bytes(b"{broken")
    areas = Areas()
    load_areas(areas, data_dir)

    with caplog.at_level(logging.ERROR, logger="bethyw.data.loader"):
        loaded = load_datasets(areas, data_dir, [BIZ, COMPLETE_POP])

    assert loaded == ["complete-pop"]
    assert "biz" in caplog.text
    assert "pop" in areas.get_area("W06000023").measures


def test_missing_dataset_file_is_skipped(data_dir, caplog):
    areas = Areas()
    load_areas(areas, data_dir)

    with caplog.at_level(logging.ERROR, logger="bethyw.data.loader"):
        loaded = load_datasets(areas, data_dir, [BIZ])

    assert loaded == []
    assert "Failed to open file" in caplog.text


def test_wide_csv_before_reference_table_fails(data_dir):
    areas = Areas()
    loaded = load_datasets(areas, data_dir, [COMPLETE_POP])
    assert loaded == []

    with pytest.raises(NotFoundError):
        import_dataset(areas, data_dir, COMPLETE_POP)

