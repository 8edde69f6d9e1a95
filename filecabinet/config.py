"""
Application settings and service composition.
Settings come from the command line; build_service turns them into an
engine wrapped in the requested decorators.
"""
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .core.exceptions import ConfigurationError
from .storage import (CachingService, FileCabinetService, FilesystemService,
                      LoggingService, MemoryService, MeteringService)
from .validation import RecordValidator, create_validator

logger = logging.getLogger(__name__)

STORAGE_MEMORY = "memory"
STORAGE_FILE = "file"
DEFAULT_DB_FILE = "cabinet-records.db"
DEFAULT_LOG_FILE = "log.txt"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """Runtime configuration of the file cabinet."""
    storage: str = STORAGE_MEMORY
    validation_rules: str = "default"
    file: str = DEFAULT_DB_FILE
    use_cache: bool = False
    use_stopwatch: bool = False
    use_logger: bool = False
    log_file: str = DEFAULT_LOG_FILE
    rules_file: Optional[str] = None
    log_level: str = "WARNING"
    legacy_remove: bool = False

    @property
    def file_mode(self) -> bool:
        return self.storage == STORAGE_FILE

    def describe(self) -> str:
        rules = "custom" if self.validation_rules == "custom" else "default"
        mode = "file" if self.file_mode else "memory"
        return f"Using {rules} validation rules. Using {mode} mode."


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filecabinet",
        description="Personnel records file cabinet")
    parser.add_argument("-s", "--storage", type=str.lower,
                        choices=[STORAGE_MEMORY, STORAGE_FILE], default=STORAGE_MEMORY,
                        help="Storage engine (default: memory)")
    parser.add_argument("-v", "--validation-rules", type=str.lower, default="default",
                        help="Validation rule set: default or custom")
    parser.add_argument("--file", default=DEFAULT_DB_FILE,
                        help=f"Backing file for file storage (default: {DEFAULT_DB_FILE})")
    parser.add_argument("--use-cache", action="store_true",
                        help="Memoize search results")
    parser.add_argument("--use-stopwatch", action="store_true",
                        help="Print the duration of every service call")
    parser.add_argument("--use-logger", action="store_true",
                        help="Log every service call to --log-file")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE,
                        help=f"Service log file (default: {DEFAULT_LOG_FILE})")
    parser.add_argument("--rules-file",
                        help="JSON file overriding the packaged validation rules")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING",
                        help="Diagnostic log level (default: WARNING)")
    parser.add_argument("--legacy-remove", action="store_true",
                        help="Reproduce the historical remove behavior of the file engine")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Settings:
    """Parse command-line arguments into Settings."""
    namespace = create_parser().parse_args(argv)
    return Settings(**vars(namespace))


def build_service(settings: Settings,
                  validator: Optional[RecordValidator] = None) -> FileCabinetService:
    """
    Compose the storage engine and its decorators.

    Order: engine, then cache, then meter, then logger, so the logger sees
    every call first and the cache answers repeated searches without
    reaching the engine.

    Raises:
        ConfigurationError: If the storage kind is unknown or rules cannot load
        StorageError: If the backing file cannot be opened
    """
    if validator is None:
        validator = create_validator(settings.validation_rules, settings.rules_file)

    if settings.storage == STORAGE_FILE:
        path = Path(settings.file)
        service: FileCabinetService = FilesystemService(
            str(path), validator, legacy_remove=settings.legacy_remove)
    elif settings.storage == STORAGE_MEMORY:
        service = MemoryService(validator)
    else:
        raise ConfigurationError(f"Unknown storage kind: {settings.storage!r}")

    if settings.use_cache:
        service = CachingService(service)
    if settings.use_stopwatch:
        service = MeteringService(service)
    if settings.use_logger:
        service = LoggingService(service, settings.log_file)

    logger.debug("Service chain built: %s", type(service).__name__)
    return service
