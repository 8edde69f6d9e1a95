from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from ...core.query import RecordQuery
from ...core.record import Record, ServiceStat
from ...core.snapshot import ServiceSnapshot


class FileCabinetService(ABC):
    """
    Abstract contract shared by every record storage engine and decorator. 🗄️

    Two engines implement it (memory and filesystem) and three decorators
    wrap it (cache, logger, meter). Decorators must be transparent: same
    return values, same exceptions.

    Key Concepts:
    - Ids are positive integers, unique among stored records 🔑
    - Every stored record has passed the engine's RecordValidator ✅
    - Single-record operations abort on the first failure; restore()
      skips invalid records and keeps going 📦
    """

    @abstractmethod
    def create_record(self, record: Record) -> int:
        """
        Store a new record. ➕

        Args:
            record: The record to store. An id of 0 asks the engine to
                    assign one.

        Returns:
            The id the record was stored under

        Raises:
            RecordValidationError: If the record is invalid
            DuplicateRecordError: If an explicit id is already stored
        """
        pass

    @abstractmethod
    def edit_record(self, record: Record) -> None:
        """
        Replace the stored record carrying ``record.id``. ✍️

        Raises:
            RecordValidationError: If the record is invalid
            RecordNotFoundError: If no record has that id
        """
        pass

    @abstractmethod
    def remove_record(self, record_id: int) -> None:
        """
        Delete the record with the given id. ➖

        Raises:
            RecordNotFoundError: If no record has that id
        """
        pass

    @abstractmethod
    def id_exists(self, record_id: int) -> bool:
        """Return True if a record with this id is stored."""
        pass

    @abstractmethod
    def get_record(self, record_id: int) -> Optional[Record]:
        """Return the record with this id, or None."""
        pass

    @abstractmethod
    def get_records(self) -> Iterable[Record]:
        """
        Return every stored record in storage order. 🔄

        The result may be lazy; each call starts a fresh pass.
        """
        pass

    @abstractmethod
    def search(self, query: RecordQuery) -> tuple[Record, ...]:
        """
        Return the records matching a query, in storage order. 🔍

        AND mode with no constraints returns every record; OR mode with no
        constraints returns nothing.
        """
        pass

    @abstractmethod
    def find_by_first_name(self, first_name: str) -> tuple[Record, ...]:
        """Return records whose first name matches, case-insensitively."""
        pass

    @abstractmethod
    def find_by_last_name(self, last_name: str) -> tuple[Record, ...]:
        """Return records whose last name matches, case-insensitively."""
        pass

    @abstractmethod
    def find_by_date_of_birth(self, date_of_birth: date) -> tuple[Record, ...]:
        """Return records born on the given date."""
        pass

    @abstractmethod
    def get_stat(self) -> ServiceStat:
        """Return active and deleted record counts. 📊"""
        pass

    @abstractmethod
    def make_snapshot(self) -> ServiceSnapshot:
        """Return an immutable copy of every stored record. 📸"""
        pass

    @abstractmethod
    def restore(self, snapshot: ServiceSnapshot) -> int:
        """
        Merge a snapshot into storage. 📥

        Existing ids are edited, new ids are created at that id. Invalid
        records are skipped and reported without aborting the batch.

        Returns:
            Number of records applied
        """
        pass

    @abstractmethod
    def purge(self) -> int:
        """
        Reclaim space held by deleted records. 🧹

        Returns:
            Number of slots reclaimed (0 for engines without soft delete)
        """
        pass

    def close(self) -> None:
        """Release resources held by the engine. No-op by default."""
        pass
