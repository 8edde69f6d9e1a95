import logging
from typing import Callable

from ..core.exceptions import DuplicateRecordError
from ..core.record import Record
from ..core.snapshot import ServiceSnapshot
from ..validation import RecordValidator

logger = logging.getLogger(__name__)


class RecordGuard:
    """
    Validation and id assignment shared by the storage engines.

    Engines hold a guard rather than inheriting from a common base; each
    engine supplies its own "is this id taken" predicate, which is how the
    memory engine keeps retired ids out of circulation while the
    filesystem engine hands freed ids back out.
    """

    def __init__(self, validator: RecordValidator):
        if validator is None:
            raise TypeError("RecordGuard requires a validator")
        self.validator = validator

    def prepare_new(self, record: Record, id_taken: Callable[[int], bool],
                    id_exists: Callable[[int], bool]) -> Record:
        """
        Validate a record for creation and give it an id.

        Args:
            record: Incoming record; id 0 (or negative) requests assignment
            id_taken: Predicate for ids that automatic assignment must skip
            id_exists: Predicate for ids currently stored

        Returns:
            The record carrying its final id

        Raises:
            RecordValidationError: If the record is invalid
            DuplicateRecordError: If an explicit id is already stored
        """
        if record is None:
            raise TypeError("Record cannot be None")

        self.validator.ensure_valid(record)

        if record.id > 0:
            if id_exists(record.id):
                raise DuplicateRecordError(record.id)
            return record

        return record.with_id(self.next_id(id_taken))

    def prepare_edit(self, record: Record) -> Record:
        if record is None:
            raise TypeError("Record cannot be None")

        self.validator.ensure_valid(record)
        return record

    @staticmethod
    def next_id(id_taken: Callable[[int], bool]) -> int:
        """Return the smallest positive integer for which id_taken is False."""
        candidate = 1
        while id_taken(candidate):
            candidate += 1
        return candidate

    def restore(self, snapshot: ServiceSnapshot,
                id_exists: Callable[[int], bool],
                insert: Callable[[Record], None],
                update: Callable[[Record], None]) -> int:
        """
        Apply a snapshot record by record.

        Invalid records are logged and skipped; valid ones are updated in
        place when their id is stored, otherwise inserted at that id.

        Returns:
            Number of records applied
        """
        if snapshot is None:
            raise TypeError("Snapshot cannot be None")

        applied = 0
        for record in snapshot.records:
            is_valid, message = self.validator.validate_record(record)
            if not is_valid or record.id <= 0:
                logger.warning(message or f"Record #{record.id} is invalid. Id must be positive.")
                continue

            if id_exists(record.id):
                update(record)
            else:
                insert(record)
            applied += 1

        return applied
