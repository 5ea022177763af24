"""Unit tests for utils/logging.py."""

import logging
import pytest
from logging.handlers import RotatingFileHandler

from fleetstats.config.settings import Settings
from fleetstats.utils.logging import resolve_level, setup_logger, setup_logger_from_settings


@pytest.mark.unit
class TestSetupLogger:
    """Test setup_logger function."""

    @pytest.fixture
    def logger_name(self, request):
        """Unique logger name per test; handlers are closed afterwards."""
        name = f"test_fleetstats_{request.node.name}"
        yield name
        lg = logging.getLogger(name)
        for h in list(lg.handlers):
            h.close()
            lg.removeHandler(h)

    def test_creates_log_directory(self, tmp_path, logger_name):
        log_dir = tmp_path / "logs" / "nested"

        setup_logger(logger_name, str(log_dir / "fleetstats.log"))

        assert log_dir.exists()

    def test_level_and_handlers(self, tmp_path, logger_name):
        logger = setup_logger(logger_name, str(tmp_path / "fleetstats.log"), level=logging.DEBUG)

        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        console_handlers = [
            h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler)
        ]
        assert logger.level == logging.DEBUG
        assert len(file_handlers) == 1
        assert len(console_handlers) == 1

    def test_rotation_settings(self, tmp_path, logger_name):
        logger = setup_logger(
            logger_name, str(tmp_path / "fleetstats.log"), max_bytes=1024, backup_count=7
        )

        file_handler = next(h for h in logger.handlers if isinstance(h, RotatingFileHandler))
        assert file_handler.maxBytes == 1024
        assert file_handler.backupCount == 7

    def test_no_duplicate_handlers_on_second_call(self, tmp_path, logger_name):
        log_file = str(tmp_path / "fleetstats.log")

        first = setup_logger(logger_name, log_file)
        handler_count = len(first.handlers)
        second = setup_logger(logger_name, log_file)

        assert first is second
        assert len(second.handlers) == handler_count

    def test_component_logger_propagates(self, tmp_path, logger_name):
        """Child loggers like '<name>.breakdown' end up in the same file."""
        log_file = tmp_path / "fleetstats.log"
        logger = setup_logger(logger_name, str(log_file))

        logging.getLogger(f"{logger_name}.breakdown").info("aggregated 3 buckets")
        for h in logger.handlers:
            h.flush()

        content = log_file.read_text()
        assert "aggregated 3 buckets" in content
        assert f"[INFO] {logger_name}.breakdown:" in content

    def test_level_name_accepted(self, tmp_path, logger_name):
        logger = setup_logger(logger_name, str(tmp_path / "fleetstats.log"), level="debug")

        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)

    def test_from_settings(self, tmp_path, logger_name):
        # Arrange
        settings = Settings(
            log_file=str(tmp_path / "svc" / "fleetstats.log"),
            log_level="warning",
            log_max_bytes=2048,
            log_backup_count=5,
        )

        # Act
        logger = setup_logger_from_settings(settings, name=logger_name)

        # Assert
        file_handler = next(h for h in logger.handlers if isinstance(h, RotatingFileHandler))
        assert logger.level == logging.WARNING
        assert file_handler.baseFilename == str(tmp_path / "svc" / "fleetstats.log")
        assert file_handler.maxBytes == 2048
        assert file_handler.backupCount == 5


@pytest.mark.unit
class TestResolveLevel:
    """Test resolve_level()."""

    def test_numeric_passthrough(self):
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_names_case_insensitive(self):
        assert resolve_level(" Info ") == logging.INFO
        assert resolve_level("CRITICAL") == logging.CRITICAL

    def test_unknown_name_rejected(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("verbose")
