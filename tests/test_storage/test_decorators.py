import pytest
import os
import re
import shutil
import tempfile
from dataclasses import replace
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from filecabinet.core import Record, RecordQuery, ServiceSnapshot, RecordNotFoundError
from filecabinet.storage import (CachingService, LoggingService, MemoryService,
                                 MeteringService, ServiceDecorator)
from filecabinet.validation import create_validator


def make_record(first_name="John", record_id=0):
    return Record(
        id=record_id,
        first_name=first_name,
        last_name="Smith",
        date_of_birth=date(1986, 5, 18),
        workplace_number=12,
        salary=Decimal("1500.00"),
        department="A",
    )


class TestServiceDecorator:
    """Tests for the forwarding base."""

    def test_requires_service(self):
        with pytest.raises(TypeError):
            ServiceDecorator(None)

    def test_forwards_every_call(self):
        inner = MemoryService(create_validator("default"))
        service = ServiceDecorator(inner)

        assert service.create_record(make_record()) == 1
        assert service.inner is inner
        assert service.id_exists(1)
        assert service.get_record(1).first_name == "John"
        assert len(service.find_by_first_name("john")) == 1
        assert str(service.get_stat()) == "1 record(s). 0 of them are deleted."


class TestCachingService:
    """Tests for search result memoization."""

    def setup_method(self):
        self.inner = MemoryService(create_validator("default"))
        self.service = CachingService(self.inner)
        self.service.create_record(make_record("John"))
        self.service.create_record(make_record("Jane"))

    def test_hit_returns_same_object(self):
        query = RecordQuery(last_name="Smith")

        first = self.service.search(query)
        second = self.service.search(RecordQuery(last_name="smith"))

        assert first is second
        assert isinstance(first, tuple)
        assert (self.service.hits, self.service.misses) == (1, 1)

    def test_inner_search_called_once(self):
        with patch.object(self.inner, "search", wraps=self.inner.search) as search:
            self.service.search(RecordQuery())
            self.service.search(RecordQuery())
        assert search.call_count == 1

    def test_create_invalidates(self):
        first = self.service.search(RecordQuery())
        self.service.create_record(make_record("Jack"))
        second = self.service.search(RecordQuery())

        assert first is not second
        assert len(second) == 3

    @pytest.mark.parametrize("mutate", [
        lambda s: s.edit_record(make_record("Jake", record_id=1)),
        lambda s: s.remove_record(1),
        lambda s: s.restore(ServiceSnapshot([make_record("Jill", record_id=9)])),
        lambda s: s.purge(),
    ])
    def test_mutations_clear_cache(self, mutate):
        self.service.search(RecordQuery())
        assert len(self.service) == 1

        mutate(self.service)

        assert len(self.service) == 0

    def test_modes_are_cached_separately(self):
        assert len(self.service.search(RecordQuery(first_name="John"))) == 1
        assert len(self.service.search(RecordQuery(first_name="John", and_mode=False))) == 1
        assert self.service.search(RecordQuery(and_mode=False)) == ()
        assert len(self.service) == 3

    def test_results_equal_uncached_results(self):
        query = RecordQuery(first_name="John")

        assert self.service.search(query) == self.inner.search(query)
        assert self.service.search(query) == self.inner.search(query)
        assert self.service.hits == 1

    def test_salaries_differing_past_cents_are_cached_apart(self):
        service = CachingService(MemoryService(create_validator("default")))
        service.create_record(replace(make_record("John"), salary=Decimal("1.00")))
        service.create_record(replace(make_record("Jane"), salary=Decimal("1.004")))

        assert [r.id for r in service.search(RecordQuery(salary=Decimal("1.00")))] == [1]
        assert [r.id for r in service.search(RecordQuery(salary=Decimal("1.004")))] == [2]
        assert [r.id for r in service.search(RecordQuery(salary=Decimal("1")))] == [1]
        assert (service.hits, service.misses) == (1, 2)


class TestLoggingService:
    """Tests for the call log written to a text file."""

    LINE = re.compile(r"^\d{2}/\d{2}/\d{4} \d{2}:\d{2} - ")

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_path = os.path.join(self.temp_dir, "log.txt")
        self.service = LoggingService(MemoryService(create_validator("default")), self.log_path)

    def teardown_method(self):
        self.service.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def read_lines(self):
        with open(self.log_path, encoding="utf-8") as f:
            return f.read().splitlines()

    def test_logs_call_and_result(self):
        assert self.service.create_record(make_record()) == 1

        lines = self.read_lines()
        assert len(lines) == 2
        assert all(self.LINE.match(line) for line in lines)
        assert "Calling create_record() with Id = '0', FirstName = 'John'" in lines[0]
        assert lines[1].endswith("create_record() returned '1'")

    def test_logs_exception_and_reraises(self):
        with pytest.raises(RecordNotFoundError):
            self.service.remove_record(5)

        lines = self.read_lines()
        assert lines[0].endswith("Calling remove_record() with Id = '5'")
        assert lines[1].endswith("remove_record() threw an exception: No record with Id = '5'.")

    def test_logs_search_summary(self):
        self.service.create_record(make_record())
        result = self.service.search(RecordQuery(first_name="John"))

        assert len(result) == 1
        lines = self.read_lines()
        assert "Calling search() with Search Mode = 'AND', FirstName = 'John'" in lines[2]
        assert lines[3].endswith("search() returned 1 record(s)")

    def test_appends_to_existing_file(self):
        self.service.get_stat()
        self.service.close()
        self.service = LoggingService(MemoryService(create_validator("default")), self.log_path)
        self.service.get_stat()

        lines = self.read_lines()
        assert len(lines) == 4
        assert lines[1].endswith("get_stat() returned '0 record(s). 0 of them are deleted.'")


class TestMeteringService:
    """Tests for call timing."""

    def setup_method(self):
        self.reports = []
        self.service = MeteringService(MemoryService(create_validator("default")),
                                       reporter=lambda method, ticks: self.reports.append((method, ticks)))

    def test_transparent_results(self):
        assert self.service.create_record(make_record()) == 1
        assert self.service.get_record(1).first_name == "John"

        assert [method for method, _ in self.reports] == ["create_record", "get_record"]
        assert all(ticks >= 0 for _, ticks in self.reports)

    def test_timing_stats(self):
        self.service.get_stat()
        self.service.get_stat()

        timing = self.service.get_timing("get_stat")
        assert timing.calls == 2
        assert timing.total_ticks >= timing.max_ticks >= 0
        assert self.service.get_timing("purge").calls == 0

    def test_failed_calls_are_timed(self):
        with pytest.raises(RecordNotFoundError):
            self.service.remove_record(1)
        assert self.reports[0][0] == "remove_record"

    def test_default_reporter_prints(self, capsys):
        service = MeteringService(MemoryService(create_validator("default")))
        service.get_stat()

        out = capsys.readouterr().out
        assert "get_stat" in out
        assert "method execution duration is" in out
        assert "ticks." in out
