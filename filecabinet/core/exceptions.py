"""Custom exceptions for the file cabinet."""


class FileCabinetException(Exception):
    """Base exception for file cabinet errors."""
    pass


class RecordValidationError(FileCabinetException):
    """Raised when a record field is outside its allowed range or format."""
    pass


class RecordNotFoundError(FileCabinetException):
    """Raised when an operation targets an id that is not stored."""

    def __init__(self, record_id: int):
        super().__init__(f"No record with Id = '{record_id}'.")
        self.record_id = record_id


class DuplicateRecordError(FileCabinetException):
    """Raised when an explicit id is already taken."""

    def __init__(self, record_id: int):
        super().__init__(f"Record with Id = '{record_id}' already exists.")
        self.record_id = record_id


class StorageError(FileCabinetException):
    """Base class for storage-related errors"""
    pass


class CorruptionError(StorageError):
    """Raised when data corruption is detected"""
    pass


class ParsingException(FileCabinetException):
    """Raised when a console command cannot be parsed."""
    pass


class ImportFormatError(FileCabinetException):
    """Raised when an import file is malformed."""
    pass


class ConfigurationError(FileCabinetException):
    """Raised when settings or validation rules cannot be loaded."""
    pass
