"""
Utility functions for the data layer
"""

import os
import sys
import logging
from datetime import datetime
from typing import Optional


# ============== LOGGING SETUP ==============

def setup_logging(level: str = "INFO", log_dir: Optional[str] = "logs") -> None:
    """Setup logging configuration"""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    if log_dir:
        # Create logs directory if not exists
        os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"crawler_data_{datetime.now().strftime('%Y%m%d')}.log"),
            encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    # Set specific log levels for noisy libraries
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("motor").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


# ============== TIME FORMATTING ==============

def time_formatter(seconds: float) -> str:
    """Format seconds to human readable time"""
    if seconds < 0:
        seconds = 0

    seconds = int(seconds)
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0:
        parts.append(f"{seconds}s")

    return " ".join(parts) if parts else "0s"


def format_datetime(dt: Optional[datetime], format: str = "%Y-%m-%d %H:%M:%S") -> str:
    """Format datetime object, '-' when missing"""
    if dt is None:
        return "-"
    return dt.strftime(format)
