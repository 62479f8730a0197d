"""
Logger Configuration Module

This module provides a centralized configuration for application logging,
with a readable format for development and JSON records for production.
"""

import os
import logging
import logging.handlers
from flask import request, has_request_context
import json
from datetime import datetime

# Attributes every LogRecord has; anything else was passed through ``extra``
RESERVED_ATTRS = frozenset((
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'msg', 'name', 'pathname', 'process', 'processName',
    'relativeCreated', 'stack_info', 'taskName', 'thread', 'threadName',
))

REQUEST_ATTRS = ('remote_addr', 'method', 'path')


class RequestFormatter(logging.Formatter):
    """
    Custom formatter that adds request-specific information to log records when available.

    Values passed explicitly through ``extra`` are never overwritten.
    """

    def format(self, record):
        if has_request_context():
            defaults = {
                'remote_addr': request.remote_addr,
                'method': request.method,
                'path': request.path,
            }
        else:
            defaults = dict.fromkeys(REQUEST_ATTRS, '-')

        if hasattr(record, 'remote_ip'):
            defaults['remote_addr'] = record.remote_ip

        for key, value in defaults.items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return super().format(record)


class JsonFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    """

    def format(self, record):
        log_record = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        # Include any extra attributes added in the log call
        for key, value in record.__dict__.items():
            if key not in RESERVED_ATTRS and key not in log_record:
                log_record[key] = value

        # Include exception info if available
        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


def setup_logging(app):
    """
    Configure application logging based on environment settings.

    Reads ``LOG_LEVEL``, ``DEBUG``, ``LOG_FILE``, ``LOG_MAX_BYTES`` and
    ``LOG_BACKUP_COUNT``.

    Args:
        app: Flask application instance
    """
    # Clear existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Get configuration from environment
    log_level_name = os.getenv('LOG_LEVEL', 'INFO')
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    debug_mode = os.getenv('DEBUG', 'False').lower() in ('true', '1', 't')
    log_file = os.getenv('LOG_FILE')

    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    if debug_mode:
        console_handler.setFormatter(RequestFormatter(
            '%(asctime)s | %(levelname)s | %(name)s | [%(remote_addr)s] %(method)s %(path)s | %(message)s'
        ))
    else:
        console_handler.setFormatter(JsonFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=int(os.getenv('LOG_MAX_BYTES', 10485760)),  # Default 10MB
            backupCount=int(os.getenv('LOG_BACKUP_COUNT', 5))
        )
        file_handler.setFormatter(JsonFormatter())
        root_logger.addHandler(file_handler)

    # Configure Flask's logger
    app.logger.handlers = []
    app.logger.propagate = True

    # Ensure that third-party libraries don't override our configuration
    for logger_name in ('werkzeug', 'gunicorn.error', 'gunicorn.access'):
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.propagate = True

    app.logger.info(f"Application logging configured. Level: {log_level_name}, Debug mode: {debug_mode}")
