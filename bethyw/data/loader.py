"""
Dataset file discovery and import: reference table first, then each dataset.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional, Sequence

from bethyw.config import DATA_DIR
from bethyw.data.areas import Areas
from bethyw.data.datasets import AREAS, DATASETS
from bethyw.data.errors import BethYwError, InvalidStreamError
from bethyw.data.schemas import ImportFilters, InputFileSource

logger = logging.getLogger(__name__)


@contextmanager
def open_input(path: Path) -> Iterator[IO[bytes]]:
    """Open a dataset file for binary reading; closed when the block exits."""
    try:
        stream = open(path, "rb")
    except OSError as exc:
        raise InvalidStreamError(f"Failed to open file {path}") from exc
    try:
        yield stream
    finally:
        stream.close()


def import_dataset(
    areas: Areas,
    data_dir: Path,
    dataset: InputFileSource,
    filters: Optional[ImportFilters] = None,
) -> None:
    """Import one dataset file into ``areas``. Errors propagate."""
    path = Path(data_dir) / dataset.file
    with open_input(path) as stream:
        areas.populate(stream, dataset.parser, dataset.cols, filters)


def load_areas(
    areas: Areas,
    data_dir: Path = DATA_DIR,
    filters: Optional[ImportFilters] = None,
) -> None:
    """Import the authority code reference table.

    Everything else depends on it, so errors are not caught here.
    """
    import_dataset(areas, data_dir, AREAS, filters)
    logger.info("Loaded %d areas from %s", len(areas), Path(data_dir) / AREAS.file)


def load_datasets(
    areas: Areas,
    data_dir: Path = DATA_DIR,
    datasets: Optional[Sequence[InputFileSource]] = None,
    filters: Optional[ImportFilters] = None,
) -> list[str]:
    """Import each dataset, skipping (and logging) any that fail.

    Returns the codes of the datasets that imported cleanly.
    """
    if datasets is None:
        datasets = DATASETS

    loaded: list[str] = []
    for i, dataset in enumerate(datasets, 1):
        try:
            import_dataset(areas, data_dir, dataset, filters)
        except BethYwError as exc:
            logger.error("[%d/%d] Error importing dataset %s (%s): %s",
                         i, len(datasets), dataset.code, dataset.file, exc)
            continue
        loaded.append(dataset.code)
        logger.info("[%d/%d] %s: %s imported", i, len(datasets), dataset.code, dataset.file)
    return loaded


def load_all(
    data_dir: Path = DATA_DIR,
    datasets: Optional[Sequence[InputFileSource]] = None,
    filters: Optional[ImportFilters] = None,
) -> tuple[Areas, list[str]]:
    """Build a populated Areas from the reference table plus ``datasets``."""
    areas = Areas()
    load_areas(areas, data_dir, filters)
    loaded = load_datasets(areas, data_dir, datasets, filters)
    return areas, loaded
