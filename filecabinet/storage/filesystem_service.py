import logging
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterator, Optional

from ..core.exceptions import (CorruptionError, RecordNotFoundError,
                               RecordValidationError, StorageError)
from ..core.query import RecordQuery
from ..core.record import Record, ServiceStat
from ..core.snapshot import ServiceSnapshot
from ..validation import RecordValidator
from .codec import RecordCodec
from .guard import RecordGuard
from .interfaces import FileCabinetService

logger = logging.getLogger(__name__)


@dataclass
class RecordSlot:
    """One fixed-width region of the backing file. id == 0 marks a free slot."""
    id: int
    offset: int

    @property
    def is_free(self) -> bool:
        return self.id == 0


class FileRecords:
    """
    Lazy, restartable view over the active records of a FilesystemService.

    Every ``iter()`` starts a fresh pass from the first slot and decodes
    each record only when it is reached.
    """

    def __init__(self, service: 'FilesystemService'):
        self._service = service

    def __iter__(self) -> Iterator[Record]:
        for slot in list(self._service._slots):
            if not slot.is_free:
                yield self._service._read_record(slot)


class FilesystemService(FileCabinetService):
    """
    Storage engine keeping records in a flat binary file. 💾

    The file is a plain sequence of RecordCodec.RECORD_SIZE slots with no
    header. An in-memory slot list (built by scanning the file once at
    startup) maps every slot to its id and byte offset.

    Key Design Decisions:
    1. **Soft delete**: removing a record only rewrites its 2-byte flag;
       the slot id becomes 0 and the slot is reused by the next create
    2. **Fixed width**: edits overwrite in place, nothing is ever relocated
    3. **Purge**: the only way to give space back; rewrites the whole file
       with the active records. Not atomic: a crash mid-purge can leave
       the file empty or partially rewritten
    4. **One handle**: the file stays open for the engine's lifetime and
       every write is flushed and fsync'ed
    """

    RECORD_SIZE = RecordCodec.RECORD_SIZE

    def __init__(self, file_path: str, validator: RecordValidator,
                 legacy_remove: bool = False):
        """
        Open (or create) the backing file and build the slot index.

        Args:
            file_path: Path to the backing file; its directory must exist
            validator: Validator applied on create/edit/restore
            legacy_remove: Reproduce the historical remove behavior that
                           targets the first free slot instead of the
                           requested id

        Raises:
            StorageError: If the path is missing or the file cannot be opened
        """
        if not file_path:
            raise StorageError("Backing file path is required")

        self.file_path = Path(file_path)
        if not self.file_path.parent.exists():
            raise StorageError(f"Directory not found: {self.file_path.parent}")

        self._guard = RecordGuard(validator)
        self._legacy_remove = legacy_remove
        self._slots: list[RecordSlot] = []
        self._slot_by_id: dict[int, RecordSlot] = {}

        try:
            if not self.file_path.exists():
                self.file_path.touch()
            self._file = open(self.file_path, 'r+b')
        except OSError as e:
            raise StorageError(f"Failed to open {self.file_path}: {e}")

        self._load_slots()

    def get_file_path(self) -> Path:
        """Return the path of the backing file."""
        return self.file_path

    def create_record(self, record: Record) -> int:
        record = self._guard.prepare_new(record, self.id_exists, self.id_exists)
        self._insert(record)
        return record.id

    def edit_record(self, record: Record) -> None:
        record = self._guard.prepare_edit(record)
        self._overwrite(record)

    def remove_record(self, record_id: int) -> None:
        """
        Soft-delete a record by writing the deletion flag over its header.

        With ``legacy_remove`` the first free slot is targeted instead of
        the slot holding ``record_id``.
        """
        if self._legacy_remove:
            slot = next((s for s in self._slots if s.is_free), None)
        else:
            slot = self._slot_by_id.get(record_id)

        if slot is None:
            raise RecordNotFoundError(record_id)

        self._write_at(slot.offset, RecordCodec.encode_flag(deleted=True))
        self._slot_by_id.pop(slot.id, None)
        slot.id = 0

    def id_exists(self, record_id: int) -> bool:
        return record_id in self._slot_by_id

    def get_record(self, record_id: int) -> Optional[Record]:
        slot = self._slot_by_id.get(record_id)
        if slot is None:
            return None
        return self._read_record(slot)

    def get_records(self) -> FileRecords:
        return FileRecords(self)

    def search(self, query: RecordQuery) -> tuple[Record, ...]:
        if query is None:
            raise TypeError("Query cannot be None")
        return tuple(record for record in self.get_records() if query.matches(record))

    def find_by_first_name(self, first_name: str) -> tuple[Record, ...]:
        return self.search(RecordQuery(first_name=first_name))

    def find_by_last_name(self, last_name: str) -> tuple[Record, ...]:
        return self.search(RecordQuery(last_name=last_name))

    def find_by_date_of_birth(self, date_of_birth: date) -> tuple[Record, ...]:
        return self.search(RecordQuery(date_of_birth=date_of_birth))

    def get_stat(self) -> ServiceStat:
        active = sum(1 for slot in self._slots if not slot.is_free)
        return ServiceStat(active=active, deleted=len(self._slots) - active)

    def make_snapshot(self) -> ServiceSnapshot:
        return ServiceSnapshot(self.get_records())

    def restore(self, snapshot: ServiceSnapshot) -> int:
        return self._guard.restore(snapshot, self.id_exists, self._insert, self._overwrite)

    def purge(self) -> int:
        """
        Compact the file so it holds only active records, in order.

        The active set is held in memory while the file is truncated and
        rewritten.

        Returns:
            Number of deleted slots reclaimed
        """
        records = list(self.get_records())
        reclaimed = len(self._slots) - len(records)

        self._slots.clear()
        self._slot_by_id.clear()
        try:
            self._file.seek(0)
            self._file.truncate(0)
        except OSError as e:
            raise StorageError(f"Failed to truncate {self.file_path}: {e}")

        for record in records:
            self._insert(record)

        logger.debug("Purged %s: %d slot(s) reclaimed, %d record(s) kept",
                     self.file_path, reclaimed, len(records))
        return reclaimed

    def slot_offset(self, record_id: int) -> int:
        """
        Return the byte offset of the slot holding ``record_id``.

        Raises:
            RecordNotFoundError: If no record has that id
        """
        slot = self._slot_by_id.get(record_id)
        if slot is None:
            raise RecordNotFoundError(record_id)
        return slot.offset

    def close(self) -> None:
        """Close the backing file."""
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> 'FilesystemService':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _insert(self, record: Record) -> None:
        """Write a record into the first free slot, or append a new slot."""
        slot = next((s for s in self._slots if s.is_free), None)
        offset = slot.offset if slot is not None else len(self._slots) * self.RECORD_SIZE

        self._write_at(offset, self._encode(record))

        if slot is None:
            slot = RecordSlot(record.id, offset)
            self._slots.append(slot)
        else:
            slot.id = record.id
        self._slot_by_id[record.id] = slot

    def _overwrite(self, record: Record) -> None:
        slot = self._slot_by_id.get(record.id)
        if slot is None:
            raise RecordNotFoundError(record.id)
        self._write_at(slot.offset, self._encode(record))

    def _encode(self, record: Record) -> bytes:
        try:
            return RecordCodec.encode(record)
        except ValueError as e:
            raise RecordValidationError(str(e))

    def _read_record(self, slot: RecordSlot) -> Record:
        try:
            self._file.seek(slot.offset)
            data = self._file.read(self.RECORD_SIZE)
        except OSError as e:
            raise StorageError(f"Failed to read slot at offset {slot.offset}: {e}")

        if len(data) != self.RECORD_SIZE:
            raise CorruptionError(f"Short read at offset {slot.offset}: "
                                  f"{len(data)} of {self.RECORD_SIZE} bytes")
        try:
            return RecordCodec.decode(data)
        except ValueError as e:
            raise CorruptionError(f"Slot at offset {slot.offset} cannot be decoded: {e}")

    def _write_at(self, offset: int, data: bytes) -> None:
        try:
            self._file.seek(offset)
            self._file.write(data)
            self._file.flush()
            os.fsync(self._file.fileno())
        except OSError as e:
            raise StorageError(f"Failed to write {len(data)} bytes at offset {offset}: {e}")

    def _load_slots(self) -> None:
        """Scan the file from offset 0 and record one slot per stride."""
        try:
            self._file.seek(0)
            offset = 0
            while True:
                data = self._file.read(self.RECORD_SIZE)
                if not data:
                    break

                if len(data) < self.RECORD_SIZE:
                    logger.warning("Ignoring %d trailing byte(s) at offset %d in %s",
                                   len(data), offset, self.file_path)
                    break

                deleted, record_id = RecordCodec.read_header(data)
                slot = RecordSlot(record_id, offset)
                self._slots.append(slot)
                if not deleted:
                    self._slot_by_id[record_id] = slot
                offset += self.RECORD_SIZE
        except OSError as e:
            raise StorageError(f"Failed to scan {self.file_path}: {e}")

        logger.debug("Loaded %d slot(s) from %s", len(self._slots), self.file_path)
