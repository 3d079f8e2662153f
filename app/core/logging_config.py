"""
Logging Configuration for the Payroll Management System
Console output is color coded by level; the log file rotates at 10MB.
"""

import logging
import logging.handlers
import os
from typing import Optional


class ColorLogFormatter(logging.Formatter):
    """Console formatter with color coded levels"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')
        original_levelname = record.levelname
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = original_levelname


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file_rotation: bool = True
):
    """Setup application logging"""

    # Create logs directory if it doesn't exist
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

    # Set log level
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {log_level}')

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_formatter = ColorLogFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        if enable_file_rotation:
            # Rotating file handler (10MB max, keep 5 backups)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5
            )
        else:
            file_handler = logging.FileHandler(log_file)

        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # SQL echo is controlled by the engine, keep its logger from flooding the file
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    for logger_name in (
        'app.employees.service',
        'app.payrolls.service',
        'app.reports.service',
        'app.dashboard.service',
        'app.settings.service',
    ):
        logging.getLogger(logger_name).setLevel(numeric_level)

    return root_logger


def log_payroll_run(
    month: int,
    year: int,
    processed: int,
    skipped: int,
    duration: Optional[float] = None,
    logger: Optional[logging.Logger] = None
):
    """Log the outcome of a payroll run in a standardized format"""

    if logger is None:
        logger = logging.getLogger('app.payrolls.service')

    message_parts = [
        f"PAYROLL RUN - {year}-{month:02d}:",
        f"processed: {processed}",
        f"skipped: {skipped}",
    ]
    if duration is not None:
        message_parts.append(f"duration: {duration:.3f}s")

    message = " | ".join(message_parts)
    if skipped and not processed:
        logger.warning(message)
    else:
        logger.info(message)
