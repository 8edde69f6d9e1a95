import pytest
import os
import shutil
import tempfile

from filecabinet.config import Settings, build_service, parse_args
from filecabinet.core import ConfigurationError
from filecabinet.storage import (CachingService, FilesystemService, LoggingService,
                                 MemoryService, MeteringService)


class TestParseArgs:
    """Tests for command-line settings."""

    def test_defaults(self):
        settings = parse_args([])

        assert settings == Settings()
        assert settings.storage == "memory"
        assert settings.file == "cabinet-records.db"
        assert settings.log_file == "log.txt"
        assert not settings.file_mode

    def test_short_and_long_forms(self):
        settings = parse_args(["-s", "FILE", "-v", "custom", "--use-cache", "--use-stopwatch",
                               "--use-logger", "--log-level", "debug", "--legacy-remove"])

        assert settings.file_mode
        assert settings.validation_rules == "custom"
        assert settings.use_cache and settings.use_stopwatch and settings.use_logger
        assert settings.log_level == "DEBUG"
        assert settings.legacy_remove

    def test_equals_form(self):
        settings = parse_args(["--storage=file", "--validation-rules=custom"])
        assert settings.describe() == "Using custom validation rules. Using file mode."

    def test_unknown_storage_is_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--storage", "cloud"])


class TestBuildService:
    """Tests for engine and decorator composition."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_memory_engine(self):
        assert isinstance(build_service(Settings()), MemoryService)

    def test_file_engine(self):
        path = os.path.join(self.temp_dir, "records.db")
        service = build_service(Settings(storage="file", file=path))
        try:
            assert isinstance(service, FilesystemService)
            assert os.path.exists(path)
        finally:
            service.close()

    def test_decorator_order(self):
        """Test that the chain is logger -> meter -> cache -> engine."""
        settings = Settings(use_cache=True, use_stopwatch=True, use_logger=True,
                            log_file=os.path.join(self.temp_dir, "log.txt"))
        service = build_service(settings)
        try:
            assert isinstance(service, LoggingService)
            assert isinstance(service.inner, MeteringService)
            assert isinstance(service.inner.inner, CachingService)
            assert isinstance(service.inner.inner.inner, MemoryService)
        finally:
            service.close()

    def test_unknown_rule_set(self):
        with pytest.raises(ConfigurationError):
            build_service(Settings(validation_rules="strict"))

    def test_unknown_storage(self):
        with pytest.raises(ConfigurationError, match="cloud"):
            build_service(Settings(storage="cloud"))
