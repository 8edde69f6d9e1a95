import pytest
import logging
import os
import shutil
import struct
import tempfile
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path

from filecabinet.core import (Record, RecordQuery, ServiceSnapshot, StorageError, CorruptionError,
                              RecordNotFoundError, DuplicateRecordError, RecordValidationError)
from filecabinet.storage import FilesystemService, RecordCodec
from filecabinet.validation import create_validator

SIZE = RecordCodec.RECORD_SIZE
# flag, id and both names precede the year; the month follows it
MONTH_OFFSET = 2 + 4 + 2 * RecordCodec.NAME_SIZE + 4


class AcceptAllValidator:
    """Stands in for a validator that lets every record through."""

    def ensure_valid(self, record):
        pass

    def validate_record(self, record):
        return True, ""


def make_record(first_name="John", last_name="Smith", record_id=0, department="A"):
    return Record(
        id=record_id,
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date(1986, 5, 18),
        workplace_number=12,
        salary=Decimal("1500.00"),
        department=department,
    )


class TestFilesystemService:
    """Tests for the binary file storage engine."""

    def setup_method(self):
        """Set up a fresh backing file for each test."""
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "cabinet-records.db")
        self.validator = create_validator("default")
        self.service = FilesystemService(self.path, self.validator)

    def teardown_method(self):
        """Clean up after each test."""
        self.service.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def reopen(self, **kwargs):
        self.service.close()
        self.service = FilesystemService(self.path, self.validator, **kwargs)
        return self.service

    def file_size(self):
        return Path(self.path).stat().st_size

    def test_creates_missing_file(self):
        assert Path(self.path).exists()
        assert self.file_size() == 0
        assert self.service.get_file_path() == Path(self.path)

    def test_missing_directory_raises(self):
        with pytest.raises(StorageError, match="Directory not found"):
            FilesystemService(os.path.join(self.temp_dir, "nope", "x.db"), self.validator)

    def test_empty_path_raises(self):
        with pytest.raises(StorageError):
            FilesystemService("", self.validator)

    def test_create_assigns_sequential_ids(self):
        ids = [self.service.create_record(make_record(name)) for name in ("John", "Jane", "Jack")]

        assert ids == [1, 2, 3]
        assert self.file_size() == 3 * SIZE
        assert [r.first_name for r in self.service.get_records()] == ["John", "Jane", "Jack"]

    def test_create_with_explicit_id(self):
        assert self.service.create_record(make_record(record_id=10)) == 10
        assert self.service.id_exists(10)
        assert self.service.create_record(make_record("Jane")) == 1

    def test_create_duplicate_id_raises(self):
        self.service.create_record(make_record(record_id=5))
        with pytest.raises(DuplicateRecordError):
            self.service.create_record(make_record("Jane", record_id=5))

    def test_create_invalid_record_writes_nothing(self):
        with pytest.raises(RecordValidationError, match="FirstName"):
            self.service.create_record(make_record(first_name=" "))
        assert self.file_size() == 0

    def test_unstorable_salary_is_rejected(self):
        with pytest.raises(RecordValidationError, match="storable range"):
            self.service.create_record(replace(make_record(), salary=Decimal("1e30")))
        assert self.file_size() == 0

    def test_encode_failure_raises_validation_error(self):
        service = FilesystemService(os.path.join(self.temp_dir, "other.db"), AcceptAllValidator())
        try:
            with pytest.raises(RecordValidationError, match="cannot be encoded"):
                service.create_record(replace(make_record(), workplace_number=70000))
            assert service.get_stat().active == 0
        finally:
            service.close()

    def test_undecodable_slot_raises_corruption_error(self):
        self.service.create_record(make_record())
        self.service.close()
        with open(self.path, "r+b") as f:
            f.seek(MONTH_OFFSET)
            f.write(struct.pack("<i", 13))

        service = self.reopen()

        with pytest.raises(CorruptionError, match="cannot be decoded"):
            service.get_record(1)

    def test_short_read_raises_corruption_error(self):
        self.service.create_record(make_record())
        os.truncate(self.path, SIZE - 10)

        with pytest.raises(CorruptionError, match="Short read"):
            self.service.get_record(1)

    def test_edit_overwrites_in_place(self):
        self.service.create_record(make_record("John"))
        self.service.create_record(make_record("Jane"))
        offset = self.service.slot_offset(2)

        self.service.edit_record(make_record("Janet", record_id=2))

        assert self.service.slot_offset(2) == offset
        assert self.service.get_record(2).first_name == "Janet"
        assert self.file_size() == 2 * SIZE

    def test_edit_missing_record_raises(self):
        with pytest.raises(RecordNotFoundError):
            self.service.edit_record(make_record(record_id=9))

    def test_remove_updates_stat(self):
        for name in ("John", "Jane", "Jack"):
            self.service.create_record(make_record(name))

        self.service.remove_record(2)

        stat = self.service.get_stat()
        assert (stat.active, stat.deleted) == (2, 1)
        assert not self.service.id_exists(2)
        assert self.service.get_record(2) is None
        assert [r.id for r in self.service.get_records()] == [1, 3]

    def test_remove_only_rewrites_flag(self):
        self.service.create_record(make_record())
        self.service.remove_record(1)

        data = Path(self.path).read_bytes()
        assert RecordCodec.read_header(data) == (True, 0)
        assert RecordCodec.decode(data).first_name == "John"

    def test_remove_missing_record_raises(self):
        with pytest.raises(RecordNotFoundError, match="Id = '4'"):
            self.service.remove_record(4)

    def test_deleted_slot_is_reused(self):
        """Test that a new record takes the first free slot and smallest free id."""
        for name in ("John", "Jane", "Jack"):
            self.service.create_record(make_record(name))
        offset = self.service.slot_offset(2)
        self.service.remove_record(2)

        new_id = self.service.create_record(make_record("Jill"))

        assert new_id == 2
        assert self.service.slot_offset(2) == offset
        assert self.file_size() == 3 * SIZE
        assert self.service.get_stat().deleted == 0

    def test_purge_compacts_file(self):
        for name in ("John", "Jane", "Jack"):
            self.service.create_record(make_record(name))
        self.service.remove_record(1)
        before = [r for r in self.service.get_records()]

        reclaimed = self.service.purge()

        assert reclaimed == 1
        assert self.service.get_stat().deleted == 0
        assert list(self.service.get_records()) == before
        assert self.file_size() == 2 * SIZE
        assert self.service.slot_offset(2) == 0
        assert self.service.slot_offset(3) == SIZE

    def test_purge_without_deleted_records(self):
        self.service.create_record(make_record())
        assert self.service.purge() == 0
        assert self.file_size() == SIZE

    def test_reopen_rebuilds_index(self):
        for name in ("John", "Jane", "Jack"):
            self.service.create_record(make_record(name))
        self.service.remove_record(2)

        service = self.reopen()

        stat = service.get_stat()
        assert (stat.active, stat.deleted) == (2, 1)
        assert [r.first_name for r in service.get_records()] == ["John", "Jack"]
        assert service.create_record(make_record("Jill")) == 2

    def test_partial_tail_is_ignored(self, caplog):
        self.service.create_record(make_record())
        self.service.close()
        with open(self.path, "ab") as f:
            f.write(b"\x00" * 10)

        with caplog.at_level(logging.WARNING, logger="filecabinet"):
            service = self.reopen()

        assert service.get_stat().active == 1
        assert "trailing" in caplog.text

    def test_get_records_is_lazy_and_restartable(self):
        self.service.create_record(make_record("John"))
        self.service.create_record(make_record("Jane"))
        records = self.service.get_records()

        first = [r.id for r in records]
        self.service.create_record(make_record("Jack"))
        second = [r.id for r in records]

        assert first == [1, 2]
        assert second == [1, 2, 3]

    def test_search_and_mode_without_constraints_returns_all(self):
        self.service.create_record(make_record("John"))
        self.service.create_record(make_record("Jane"))

        assert len(self.service.search(RecordQuery())) == 2

    def test_search_or_mode_without_constraints_returns_nothing(self):
        self.service.create_record(make_record("John"))
        assert self.service.search(RecordQuery(and_mode=False)) == ()

    def test_search_or_mode(self):
        self.service.create_record(make_record("John", department="A"))
        self.service.create_record(make_record("Jane", department="B"))
        self.service.create_record(make_record("Jack", department="C"))

        query = RecordQuery(first_name="john", department="C", and_mode=False)
        assert [r.first_name for r in self.service.search(query)] == ["John", "Jack"]

    def test_finders(self):
        self.service.create_record(make_record("John", "Smith"))
        self.service.create_record(make_record("Jane", "Doe"))

        assert [r.id for r in self.service.find_by_first_name("JANE")] == [2]
        assert [r.id for r in self.service.find_by_last_name("smith")] == [1]
        assert len(self.service.find_by_date_of_birth(date(1986, 5, 18))) == 2

    def test_restore_merges_snapshot(self, caplog):
        self.service.create_record(make_record("John"))
        snapshot = ServiceSnapshot([
            make_record("Johnny", record_id=1),
            make_record("Jane", record_id=10),
            make_record("", record_id=11),
        ])

        with caplog.at_level(logging.WARNING, logger="filecabinet"):
            applied = self.service.restore(snapshot)

        assert applied == 2
        assert self.service.get_record(1).first_name == "Johnny"
        assert self.service.get_record(10).first_name == "Jane"
        assert not self.service.id_exists(11)
        assert "Record #11 is invalid" in caplog.text

    def test_restore_skips_unstorable_record(self, caplog):
        snapshot = ServiceSnapshot([
            make_record("John", record_id=1),
            replace(make_record("Jane", record_id=2), salary=Decimal("1e30")),
            make_record("Jack", record_id=3),
        ])

        with caplog.at_level(logging.WARNING, logger="filecabinet"):
            applied = self.service.restore(snapshot)

        assert applied == 2
        assert [r.id for r in self.service.get_records()] == [1, 3]
        assert "Record #2 is invalid" in caplog.text

    def test_make_snapshot(self):
        self.service.create_record(make_record("John"))
        snapshot = self.service.make_snapshot()
        self.service.create_record(make_record("Jane"))

        assert len(snapshot) == 1

    def test_context_manager_closes_file(self):
        with FilesystemService(os.path.join(self.temp_dir, "other.db"), self.validator) as service:
            service.create_record(make_record())
        assert service._file.closed


class TestLegacyRemove:
    """Tests for the compatibility remove that targets the first free slot."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "legacy.db")
        self.validator = create_validator("default")

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_without_free_slot_raises(self):
        with FilesystemService(self.path, self.validator, legacy_remove=True) as service:
            service.create_record(make_record())
            with pytest.raises(RecordNotFoundError):
                service.remove_record(1)
            assert service.id_exists(1)

    def test_targets_first_free_slot(self):
        with FilesystemService(self.path, self.validator) as service:
            for name in ("John", "Jane", "Jack"):
                service.create_record(make_record(name))
            service.remove_record(2)

        with FilesystemService(self.path, self.validator, legacy_remove=True) as service:
            service.remove_record(3)

            assert service.id_exists(3)
            stat = service.get_stat()
            assert (stat.active, stat.deleted) == (2, 1)
