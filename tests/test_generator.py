"""
Tests for the random record generator.
"""

import os
import random
import shutil
import tempfile

from filecabinet.core import ServiceSnapshot
from filecabinet.generator import generate_records, main, write_records
from filecabinet.storage import MemoryService
from filecabinet.validation import create_validator


class TestGenerator:
    """Tests for record generation and file output."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_generates_consecutive_valid_records(self):
        validator = create_validator("default")
        records = list(generate_records(50, 10, random.Random(1)))

        assert [r.id for r in records] == list(range(10, 60))
        assert all(validator.validate_record(r)[0] for r in records)

    def test_seed_is_reproducible(self):
        first = list(generate_records(5, 1, random.Random(7)))
        second = list(generate_records(5, 1, random.Random(7)))
        assert first == second

    def test_csv_output_imports_cleanly(self):
        path = os.path.join(self.temp_dir, "records.csv")
        assert write_records("csv", path, 20, 1, seed=3) == 20

        with open(path, encoding="utf-8") as f:
            snapshot = ServiceSnapshot.load_from_csv(f)
        service = MemoryService(create_validator("default"))

        assert service.restore(snapshot) == 20

    def test_xml_output(self):
        path = os.path.join(self.temp_dir, "records.xml")
        write_records("xml", path, 3, 5, seed=3)

        snapshot = ServiceSnapshot.load_from_xml(path)
        assert [r.id for r in snapshot] == [5, 6, 7]

    def test_main(self, capsys):
        path = os.path.join(self.temp_dir, "records.csv")
        code = main(["--output-type", "csv", "--output", path,
                     "--records-amount", "4", "--start-id", "2"])

        assert code == 0
        assert "4 records were written to" in capsys.readouterr().out

    def test_main_missing_directory(self, capsys):
        code = main(["-t", "xml", "-o", os.path.join(self.temp_dir, "no", "r.xml"), "-a", "1"])

        assert code == 1
        assert "No such directory" in capsys.readouterr().out
