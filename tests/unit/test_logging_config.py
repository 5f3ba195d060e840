"""
Unit tests for structured logging configuration.
"""

import json
import logging
from pathlib import Path

from merkle_partial.cache import ChunkCache
from merkle_partial.logging_config import (
    setup_logging,
    get_logger,
    set_correlation_id,
    clear_correlation_id,
    get_correlation_id,
    log_cache_recompute,
    log_partial_extract,
    log_partial_verification,
)


def _read_entries(log_file: Path):
    return [json.loads(line) for line in log_file.read_text().splitlines() if line]


class TestLoggingConfiguration:
    """Test structured logging configuration functionality."""
    
    def test_setup_logging_default(self):
        """Test setup_logging with default parameters."""
        setup_logging()
        
        logger = get_logger("test")
        # Logger can be BoundLogger or BoundLoggerLazyProxy (both are valid)
        assert hasattr(logger, 'info') and hasattr(logger, 'warning') and hasattr(logger, 'debug')
    
    def test_setup_logging_with_level(self):
        """Test setup_logging with custom log level."""
        setup_logging(level="DEBUG")
        
        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
    
    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO
    
    def test_setup_logging_with_file(self, temp_dir: Path):
        """Test setup_logging with log file."""
        log_file = temp_dir / "nested" / "test.log"
        setup_logging(level="INFO", log_file=log_file)
        
        logger = get_logger("test")
        logger.info("test_message", key="value")
        
        assert log_file.exists()
        assert "test_message" in log_file.read_text()
    
    def test_setup_logging_json_format(self, temp_dir: Path):
        """Test setup_logging with JSON format."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        logger = get_logger("test")
        logger.info("test_message", key="value")
        
        log_entry = _read_entries(log_file)[0]
        assert log_entry["event"] == "test_message"
        assert log_entry["key"] == "value"
        assert log_entry["logger"] == "merkle_partial.test"
        assert "timestamp" in log_entry
        assert "level" in log_entry
    
    def test_setup_logging_human_format(self, temp_dir: Path):
        """Test setup_logging with human-readable format."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=False)
        
        logger = get_logger("test")
        logger.info("test_message", key="value")
        
        log_content = log_file.read_text()
        assert "test_message" in log_content
        assert "key" in log_content
    
    def test_get_logger_keeps_package_prefix(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        get_logger("merkle_partial.cache").info("prefixed")
        
        assert _read_entries(log_file)[0]["logger"] == "merkle_partial.cache"
    
    def test_correlation_id_management(self):
        """Test correlation ID context management."""
        assert get_correlation_id() is None
        
        correlation_id = set_correlation_id("test-correlation-id")
        assert correlation_id == "test-correlation-id"
        assert get_correlation_id() == "test-correlation-id"
        
        clear_correlation_id()
        assert get_correlation_id() is None
    
    def test_correlation_id_auto_generation(self):
        """Test correlation ID auto-generation."""
        correlation_id = set_correlation_id()
        assert correlation_id
        assert get_correlation_id() == correlation_id
        
        clear_correlation_id()
    
    def test_correlation_id_in_logs(self, temp_dir: Path):
        """Test correlation ID appears in log output."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        logger = get_logger("test")
        set_correlation_id("test-correlation-123")
        logger.info("test_message")
        
        assert _read_entries(log_file)[0]["correlation_id"] == "test-correlation-123"
        
        clear_correlation_id()


class TestLoggingHelpers:
    """Test convenience logging helpers."""

    def test_log_partial_extract(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="DEBUG", log_file=log_file, json_format=True)
        
        log_partial_extract(get_logger("test"), path="balances/5", leaf_index=20, proof_size=6)
        
        log_entry = _read_entries(log_file)[0]
        assert log_entry["event_type"] == "partial_extract"
        assert log_entry["path"] == "balances/5"
        assert log_entry["leaf_index"] == 20
        assert log_entry["proof_size"] == 6
        assert log_entry["level"] == "debug"
    
    def test_debug_helpers_hidden_at_info(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        log_cache_recompute(get_logger("test"), operation="fill", updated=3, duration_ms=0.1)
        
        assert _read_entries(log_file) == []
    
    def test_cache_operations_log_recompute(self, temp_dir: Path, header_leaves):
        log_file = temp_dir / "test.log"
        setup_logging(level="DEBUG", log_file=log_file, json_format=True)
        
        ChunkCache(header_leaves).refresh()
        
        entries = [e for e in _read_entries(log_file) if e.get("event_type") == "cache_recompute"]
        assert entries[-1]["operation"] == "refresh"
        assert entries[-1]["updated"] == 3
    
    def test_log_partial_verification_success(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        log_partial_verification(get_logger("test"), root="ab" * 32, success=True, duration_ms=1.5)
        
        log_entry = _read_entries(log_file)[0]
        assert log_entry["event_type"] == "partial_verification"
        assert log_entry["success"] is True
        assert "failure_reason" not in log_entry
        assert log_entry["level"] == "info"
    
    def test_log_partial_verification_failure(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        log_partial_verification(
            get_logger("test"),
            root="ab" * 32,
            success=False,
            duration_ms=1.5,
            failure_reason="root_mismatch",
        )
        
        log_entry = _read_entries(log_file)[0]
        assert log_entry["event"] == "partial_verification_failed"
        assert log_entry["success"] is False
        assert log_entry["failure_reason"] == "root_mismatch"
        assert log_entry["level"] == "warning"
    
    def test_structured_logging_with_extra_fields(self, temp_dir: Path):
        """Test that extra fields are included in structured logs."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)
        
        logger = get_logger("test")
        logger.info("test_event", custom_field="custom_value", number=42)
        
        log_entry = _read_entries(log_file)[0]
        assert log_entry["custom_field"] == "custom_value"
        assert log_entry["number"] == 42
