from .exceptions import (
    FileCabinetException,
    RecordValidationError,
    RecordNotFoundError,
    DuplicateRecordError,
    StorageError,
    CorruptionError,
    ParsingException,
    ImportFormatError,
    ConfigurationError,
)
from .record import Record, ServiceStat, format_date, parse_date, format_salary, parse_salary
from .query import RecordQuery
from .snapshot import ServiceSnapshot

__all__ = [
    "FileCabinetException",
    "RecordValidationError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "StorageError",
    "CorruptionError",
    "ParsingException",
    "ImportFormatError",
    "ConfigurationError",
    "Record",
    "ServiceStat",
    "RecordQuery",
    "ServiceSnapshot",
    "format_date",
    "parse_date",
    "format_salary",
    "parse_salary",
]
