"""Logging infrastructure with statement context."""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Union


class SourceContextFilter(logging.Filter):
    """Add the statement being processed to log records."""

    def __init__(self):
        super().__init__()
        self.source: Optional[str] = None

    def filter(self, record):
        """Add source to record."""
        record.source = self.source or "-"
        return True


class BudgetRulesLogger:
    """Centralized logging manager."""

    def __init__(self, log_level: str = "INFO"):
        self.log_file: Optional[Path] = None
        self.source_filter = SourceContextFilter()
        self.formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [source:%(source)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        self.logger = logging.getLogger("budgetrules")
        self.logger.propagate = False
        self.configure(log_level)

    def configure(
        self,
        log_level: str = "INFO",
        log_dir: Optional[Union[str, Path]] = None,
        max_file_size_mb: int = 10,
        backup_count: int = 30
    ) -> None:
        """(Re)build handlers. A file handler is added only when log_dir is set."""
        level = getattr(logging, log_level.upper(), None)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        self.logger.setLevel(level)

        # Remove existing handlers
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        # Console goes to stderr so stdout stays clean for command output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(self.formatter)
        console_handler.addFilter(self.source_filter)
        self.logger.addHandler(console_handler)

        self.log_file = None
        if log_dir:
            log_path = Path(log_dir).expanduser()
            log_path.mkdir(parents=True, exist_ok=True)
            self.log_file = log_path / "budgetrules.log"

            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8"
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(self.formatter)
            file_handler.addFilter(self.source_filter)
            self.logger.addHandler(file_handler)

    def set_source_context(self, source: Optional[str]):
        """Set the statement currently being processed."""
        self.source_filter.source = source

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[BudgetRulesLogger] = None


def _instance(log_level: str = "INFO") -> BudgetRulesLogger:
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = BudgetRulesLogger(log_level)
    return _logger_instance


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    return _instance(log_level).get_logger()


def configure_logging(
    log_level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 30
) -> logging.Logger:
    """Apply settings to the global logger."""
    manager = _instance(log_level)
    manager.configure(log_level, log_dir, max_file_size_mb, backup_count)
    return manager.get_logger()


def set_source_context(source: Optional[str]):
    """Set source context for logging."""
    if _logger_instance:
        _logger_instance.set_source_context(source)
