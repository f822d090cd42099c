"""
Shared utilities for the SaaS starter

This package contains logging and Redis helpers.
"""

from .logger import setup_logging, AuditLogger, get_audit_logger
from .redis_client import RedisClient

__all__ = [
    "setup_logging",
    "AuditLogger",
    "get_audit_logger",
    "RedisClient",
]

__version__ = "1.0.0"
