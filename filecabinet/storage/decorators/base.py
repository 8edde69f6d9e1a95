from datetime import date
from typing import Iterable, Optional

from ...core.query import RecordQuery
from ...core.record import Record, ServiceStat
from ...core.snapshot import ServiceSnapshot
from ..interfaces import FileCabinetService


class ServiceDecorator(FileCabinetService):
    """
    Forwarding wrapper around another FileCabinetService.

    Every contract method funnels through ``_invoke`` so subclasses that
    observe all calls (logger, meter) override a single hook, while those
    that change specific calls (cache) override the methods themselves.
    """

    def __init__(self, service: FileCabinetService):
        if service is None:
            raise TypeError("Decorated service cannot be None")
        self._service = service

    @property
    def inner(self) -> FileCabinetService:
        """Return the wrapped service."""
        return self._service

    def _invoke(self, method: str, *args):
        return getattr(self._service, method)(*args)

    def create_record(self, record: Record) -> int:
        return self._invoke("create_record", record)

    def edit_record(self, record: Record) -> None:
        return self._invoke("edit_record", record)

    def remove_record(self, record_id: int) -> None:
        return self._invoke("remove_record", record_id)

    def id_exists(self, record_id: int) -> bool:
        return self._invoke("id_exists", record_id)

    def get_record(self, record_id: int) -> Optional[Record]:
        return self._invoke("get_record", record_id)

    def get_records(self) -> Iterable[Record]:
        return self._invoke("get_records")

    def search(self, query: RecordQuery) -> tuple[Record, ...]:
        return self._invoke("search", query)

    def find_by_first_name(self, first_name: str) -> tuple[Record, ...]:
        return self._invoke("find_by_first_name", first_name)

    def find_by_last_name(self, last_name: str) -> tuple[Record, ...]:
        return self._invoke("find_by_last_name", last_name)

    def find_by_date_of_birth(self, date_of_birth: date) -> tuple[Record, ...]:
        return self._invoke("find_by_date_of_birth", date_of_birth)

    def get_stat(self) -> ServiceStat:
        return self._invoke("get_stat")

    def make_snapshot(self) -> ServiceSnapshot:
        return self._invoke("make_snapshot")

    def restore(self, snapshot: ServiceSnapshot) -> int:
        return self._invoke("restore", snapshot)

    def purge(self) -> int:
        return self._invoke("purge")

    def close(self) -> None:
        self._service.close()
