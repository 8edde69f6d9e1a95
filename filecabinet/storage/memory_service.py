from collections import defaultdict
from datetime import date
from typing import Optional

from ..core.exceptions import RecordNotFoundError
from ..core.query import RecordQuery
from ..core.record import Record, ServiceStat, format_date
from ..core.snapshot import ServiceSnapshot
from ..validation import RecordValidator
from .guard import RecordGuard
from .interfaces import FileCabinetService


class MemoryService(FileCabinetService):
    """
    Storage engine keeping records in a Python list.

    Three dictionaries (case-folded first name, case-folded last name and
    MM/DD/YYYY birth date) speed up the find_by_* lookups; ``search`` is a
    linear scan.

    Removal deletes the record outright, so there is nothing to purge and
    the deleted count is always 0. Automatically assigned ids are never
    handed out twice, even after the record that held one is removed.
    """

    def __init__(self, validator: RecordValidator):
        self._guard = RecordGuard(validator)
        self._records: list[Record] = []
        self._issued_ids: set[int] = set()
        self._by_first_name: dict[str, list[Record]] = defaultdict(list)
        self._by_last_name: dict[str, list[Record]] = defaultdict(list)
        self._by_date_of_birth: dict[str, list[Record]] = defaultdict(list)

    def create_record(self, record: Record) -> int:
        record = self._guard.prepare_new(record, self._id_taken, self.id_exists)
        self._insert(record)
        return record.id

    def edit_record(self, record: Record) -> None:
        record = self._guard.prepare_edit(record)
        self._replace(record)

    def remove_record(self, record_id: int) -> None:
        index = self._index_of(record_id)
        if index is None:
            raise RecordNotFoundError(record_id)

        record = self._records.pop(index)
        self._unindex(record)

    def id_exists(self, record_id: int) -> bool:
        return self._index_of(record_id) is not None

    def get_record(self, record_id: int) -> Optional[Record]:
        index = self._index_of(record_id)
        return self._records[index] if index is not None else None

    def get_records(self) -> tuple[Record, ...]:
        return tuple(self._records)

    def search(self, query: RecordQuery) -> tuple[Record, ...]:
        if query is None:
            raise TypeError("Query cannot be None")
        return tuple(record for record in self._records if query.matches(record))

    def find_by_first_name(self, first_name: str) -> tuple[Record, ...]:
        return tuple(self._by_first_name.get(first_name.casefold(), ()))

    def find_by_last_name(self, last_name: str) -> tuple[Record, ...]:
        return tuple(self._by_last_name.get(last_name.casefold(), ()))

    def find_by_date_of_birth(self, date_of_birth: date) -> tuple[Record, ...]:
        return tuple(self._by_date_of_birth.get(format_date(date_of_birth), ()))

    def get_stat(self) -> ServiceStat:
        return ServiceStat(active=len(self._records), deleted=0)

    def make_snapshot(self) -> ServiceSnapshot:
        return ServiceSnapshot(self._records)

    def restore(self, snapshot: ServiceSnapshot) -> int:
        return self._guard.restore(snapshot, self.id_exists, self._insert, self._replace)

    def purge(self) -> int:
        # Nothing to compact: removed records leave no holes
        return 0

    def _id_taken(self, record_id: int) -> bool:
        return record_id in self._issued_ids

    def _index_of(self, record_id: int) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _insert(self, record: Record) -> None:
        self._records.append(record)
        self._issued_ids.add(record.id)
        self._index(record)

    def _replace(self, record: Record) -> None:
        index = self._index_of(record.id)
        if index is None:
            raise RecordNotFoundError(record.id)

        self._unindex(self._records[index])
        self._records[index] = record
        self._index(record)

    def _index(self, record: Record) -> None:
        self._by_first_name[record.first_name.casefold()].append(record)
        self._by_last_name[record.last_name.casefold()].append(record)
        self._by_date_of_birth[format_date(record.date_of_birth)].append(record)

    def _unindex(self, record: Record) -> None:
        for index, key in ((self._by_first_name, record.first_name.casefold()),
                           (self._by_last_name, record.last_name.casefold()),
                           (self._by_date_of_birth, format_date(record.date_of_birth))):
            bucket = index.get(key)
            if bucket is None:
                continue
            bucket[:] = [r for r in bucket if r.id != record.id]
            if not bucket:
                del index[key]
