"""
Logger Configuration Module

Handles logging setup for search fence operations.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def create_logger():
    # Create logs directory if it doesn't exist
    Path("logs").mkdir(parents=True, exist_ok=True)

    search_logger = logging.getLogger("search_fence")
    search_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    # Create file handler for search fence logs
    file_handler = logging.FileHandler("logs/search_fence.log", encoding="utf-8")
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    search_logger.addHandler(file_handler)

    # Keep httpx request lines out of the search log unless debugging
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return search_logger


search_logger: logging.Logger | None = None


def setup_logging():
    global search_logger
    if search_logger is None:
        search_logger = create_logger()
    return search_logger
