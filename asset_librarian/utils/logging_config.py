"""
Logging configuration for Asset Librarian

Console output on stderr plus one log file per day under the library's
.meta/logs folder. Old daily files are pruned at startup.
"""

import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_PATTERN = 'app_*.log'


class LoggingConfig:
    """
    Logging configuration manager

    Provides static methods for setting up and getting loggers.
    """

    _initialized = False

    @staticmethod
    def get_log_file(log_dir: Path, day: Optional[datetime] = None) -> Path:
        """Daily log file: app_YYYYMMDD.log"""
        day = day or datetime.now()
        return Path(log_dir) / f"app_{day.strftime('%Y%m%d')}.log"

    @staticmethod
    def prune_old_logs(log_dir: Path, retention_days: int) -> int:
        """
        Delete daily log files older than the retention window.

        Returns:
            Number of files removed
        """
        cutoff = (datetime.now() - timedelta(days=retention_days)).strftime('%Y%m%d')
        removed = 0
        for log_file in Path(log_dir).glob(LOG_FILE_PATTERN):
            stamp = log_file.stem[len('app_'):]
            if stamp.isdigit() and stamp < cutoff:
                try:
                    log_file.unlink()
                    removed += 1
                except OSError:
                    continue
        return removed

    @staticmethod
    def setup_logging(
        log_dir: Optional[Path] = None,
        level: int = logging.INFO,
        log_to_file: bool = True,
        log_to_console: bool = True,
        retention_days: int = 30
    ) -> logging.Logger:
        """
        Configure application logging

        Args:
            log_dir: Directory for daily log files (usually <storage>/.meta/logs)
            level: Logging level (default INFO)
            log_to_file: Enable file logging
            log_to_console: Enable console logging on stderr
            retention_days: Daily files older than this are deleted

        Returns:
            Package logger ('asset_librarian')
        """
        logger = logging.getLogger('asset_librarian')
        logger.setLevel(level)

        # Clear existing handlers to avoid duplicates
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        # stdout is reserved for command output
        if log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if log_to_file and log_dir:
            try:
                log_dir = Path(log_dir)
                log_dir.mkdir(parents=True, exist_ok=True)
                pruned = LoggingConfig.prune_old_logs(log_dir, retention_days)

                file_handler = logging.FileHandler(
                    LoggingConfig.get_log_file(log_dir), encoding='utf-8'
                )
                file_handler.setLevel(level)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

                if pruned:
                    logger.debug(f"Removed {pruned} old log file(s)")
            except OSError as e:
                # If file logging fails, just log to console
                logger.warning(f"Could not set up file logging: {e}")

        LoggingConfig._initialized = True
        return logger

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        """
        Get a logger for a specific module

        Args:
            name: Module name (typically __name__)

        Returns:
            Logger instance
        """
        return logging.getLogger(name)


__all__ = ['LoggingConfig', 'LOG_FORMAT']
