import logging
from datetime import date
from pathlib import Path
from typing import Any

from ...core.query import RecordQuery
from ...core.record import Record, ServiceStat, format_date
from ...core.snapshot import ServiceSnapshot
from ..interfaces import FileCabinetService
from .base import ServiceDecorator

LOG_FORMAT = "%(asctime)s - %(message)s"
LOG_DATE_FORMAT = "%m/%d/%Y %H:%M"


def _describe_argument(value: Any) -> str:
    if isinstance(value, Record):
        return value.describe()
    if isinstance(value, RecordQuery):
        return value.describe()
    if isinstance(value, date):
        return f"DateOfBirth = '{format_date(value)}'"
    if isinstance(value, int):
        return f"Id = '{value}'"
    if isinstance(value, ServiceSnapshot):
        return str(value)
    return f"'{value}'"


def _describe_result(value: Any) -> str:
    if isinstance(value, bool):
        return f"'{value}'"
    if isinstance(value, int):
        return f"'{value}'"
    if isinstance(value, (Record, ServiceStat, ServiceSnapshot)):
        return f"'{value}'"
    if isinstance(value, (list, tuple)):
        return f"{len(value)} record(s)"
    return "a record sequence"


class LoggingService(ServiceDecorator):
    """
    Appends one line per call, one per result and one per failure to a
    plain-text log file.

    Lines look like ``10/19/2026 14:05 - Calling create_record() with ...``.
    Exceptions are logged and re-raised unchanged.
    """

    def __init__(self, service: FileCabinetService, log_path: str = "log.txt"):
        super().__init__(service)
        self.log_path = Path(log_path)

        self._logger = logging.getLogger(f"filecabinet.service.{id(self)}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False

        self._handler = logging.FileHandler(self.log_path, mode='a', encoding='utf-8')
        self._handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        self._logger.addHandler(self._handler)

    def _invoke(self, method: str, *args):
        if args:
            described = ", ".join(_describe_argument(arg) for arg in args)
            self._logger.info("Calling %s() with %s", method, described)
        else:
            self._logger.info("Calling %s()", method)

        try:
            result = super()._invoke(method, *args)
        except Exception as e:
            self._logger.info("%s() threw an exception: %s", method, e)
            raise

        if result is None:
            self._logger.info("%s() executed successfully", method)
        else:
            self._logger.info("%s() returned %s", method, _describe_result(result))
        return result

    def close(self) -> None:
        """Detach and close the log file handler, then close the wrapped service."""
        self._logger.removeHandler(self._handler)
        self._handler.close()
        super().close()
