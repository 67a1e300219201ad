"""
News Portal Core
================

Core utilities and shared functionality for the portal modules.
"""

from .config import Config
from .database import Database
from .logging_service import LoggingService, logger, configure_logging

__all__ = ['Config', 'Database', 'LoggingService', 'logger', 'configure_logging']
