"""
Ghar Nari - Core Package
========================

Framework essentials: config, constants, and logging.
"""

from gharnari.core.config import config
from gharnari.core.logger import logger

__all__ = ["config", "logger"]
