"""
Logging utilities for the SaaS starter

Provides centralized logging configuration and utilities.
"""

import copy
import os
import logging
import logging.config
from typing import Optional, Dict, Any

import structlog
import yaml

# Default logging configuration
DEFAULT_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(message)s',
        },
        'detailed': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(lineno)d - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'loggers': {
        '': {
            'level': 'INFO',
            'handlers': ['console'],
        },
        'uvicorn.access': {
            'level': 'WARNING',
            'handlers': ['console'],
            'propagate': False
        }
    }
}


def load_logging_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a dictConfig mapping

    Args:
        config_path: Optional path to a YAML logging configuration

    Returns:
        dict: Logging configuration (defaults when no file is usable)
    """
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
            if isinstance(config, dict):
                return config
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(__name__).warning(
                f"Failed to load logging config from {config_path}: {e}"
            )

    return copy.deepcopy(DEFAULT_LOGGING_CONFIG)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    config_path: Optional[str] = None
) -> None:
    """
    Setup stdlib logging and structlog

    Args:
        log_level: Minimum level for all handlers and loggers
        log_format: 'json' for machine-readable output, 'console' for development
        config_path: Optional YAML dictConfig file
    """
    config = load_logging_config(config_path)

    log_level = log_level.upper()
    for name, logger_config in config.get('loggers', {}).items():
        if name != 'uvicorn.access':
            logger_config['level'] = log_level
    for handler_config in config.get('handlers', {}).values():
        handler_config['level'] = log_level

    logging.config.dictConfig(config)

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """Logger for audit events"""

    def __init__(self, name: str = "saas_starter.audit"):
        self.logger = structlog.get_logger(name)

    def log_user_action(
        self,
        user_id: str,
        action: str,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Log user action for audit trail"""
        self.logger.info(
            "User action",
            user_id=user_id,
            action=action,
            resource=resource,
            resource_id=resource_id,
            details=details or {},
            event_type="user_action"
        )


def get_audit_logger() -> AuditLogger:
    """Get audit logger instance"""
    return AuditLogger()
