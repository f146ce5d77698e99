"""Data model, dataset registry and import engine."""
from .errors import BethYwError, NotFoundError, MalformedInputError, InvalidStreamError, UnsupportedFormatError
from .schemas import ImportFilters, InputFileSource, SourceColumn, SourceDataType
from .measure import Measure
from .area import Area
from .areas import Areas
from .loader import load_all, load_areas, load_datasets
