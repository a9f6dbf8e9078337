"""
Utility functions for Champion Matchup Analysis
"""
import logging
import math
import os
from pathlib import Path
from typing import Optional

from tqdm import tqdm

import config

logger = logging.getLogger(__name__)

INDENTATION = '  '
UNKNOWN_MARKER = '?'


class TqdmLoggingHandler(logging.Handler):
    """Logging handler that routes output through tqdm.write() to avoid breaking progress bars."""
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the application

    Args:
        verbose: Enable DEBUG level logging
        log_file: Optional file path to write logs
    """
    level = logging.DEBUG if verbose else logging.INFO

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers = []

    # Console handler
    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(level)
    console_formatter = logging.Formatter(
        config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT
    )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_formatter = logging.Formatter(
            config.LOG_FORMAT,
            datefmt=config.LOG_DATE_FORMAT
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)
        logger.info(f"Logging to file: {log_file}")


def format_duration(seconds: int) -> str:
    """
    Format duration in seconds to human-readable string

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., '2h 30m 15s')
    """
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return ' '.join(parts)


def format_number(num: int) -> str:
    """Format large numbers with commas (e.g., '1,000,000')"""
    return f"{num:,}"


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if denominator is zero

    Args:
        numerator: Numerator
        denominator: Denominator
        default: Value to return if denominator is zero

    Returns:
        Result of division or default
    """
    return numerator / denominator if denominator != 0 else default


def format_percent(value: Optional[float]) -> str:
    """
    Format a 0-1 fraction as an integer percentage, truncating decimals

    Args:
        value: Fraction (e.g., 0.6923) or None when unknown

    Returns:
        Formatted string (e.g., '69%'), or the unknown marker for None
    """
    if value is None:
        return UNKNOWN_MARKER
    # round off float noise first so 0.58 stays 58
    return f"{math.floor(round(value * 100, 9))}%"


def format_ratio(wins: int, total: int) -> str:
    """
    Format wins over total as an integer percentage

    Returns:
        Formatted string (e.g., '66%'), or the unknown marker when total is zero
    """
    if total == 0:
        return UNKNOWN_MARKER
    return f"{wins * 100 // total}%"


def indent_text(text: str, indentation: str = INDENTATION) -> str:
    """Prefix every line of text, including empty ones, with the indentation string"""
    return '\n'.join(indentation + line for line in text.split('\n'))


def create_output_dirs(output_dir: str = config.OUTPUT_DIR) -> None:
    """Create output directories if they don't exist"""
    dirs = [
        output_dir,
        os.path.join(output_dir, 'charts'),
        os.path.join(output_dir, 'csv'),
    ]

    for dir_path in dirs:
        Path(dir_path).mkdir(parents=True, exist_ok=True)
        logger.debug(f"Ensured directory exists: {dir_path}")
