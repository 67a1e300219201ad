"""
Centralized logging service for the news portal.
Wraps the standard logging module so every component logs under the
``newsportal.<source>`` namespace with the current request attached.
"""

import json
import logging
import traceback
from flask import request, has_request_context

ROOT_LOGGER = 'newsportal'


def configure_logging(app):
    """Set the namespace level from LOG_LEVEL and attach one console handler"""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    if not any(getattr(h, '_newsportal', False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
        ))
        handler._newsportal = True
        root.addHandler(handler)
    return root


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        return f"{request.method} {request.path} from {ip_address}"

    @staticmethod
    def log(level, source, message, details=None):
        """
        Log a message

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (articles, auth, uploads, etc.)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
        """
        log = logging.getLogger(f"{ROOT_LOGGER}.{source}")
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        if isinstance(details, dict):
            details = json.dumps(details, default=str)

        parts = [message]
        context = LoggingService._get_request_context()
        if context:
            parts.append(f"({context})")
        if details:
            parts.append(f"| {details}")

        log.log(numeric_level, ' '.join(parts))

    @staticmethod
    def debug(source, message, details=None):
        LoggingService.log('DEBUG', source, message, details)

    @staticmethod
    def info(source, message, details=None):
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def log_user_action(source, action, username=None, details=None):
        """Log user actions (login, logout, setup)"""
        details = dict(details or {})
        if username:
            details['username'] = username
        LoggingService.info(source, f"User action: {action}", details or None)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events"""
        LoggingService.warning('security', message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)


# Convenience instance for easy importing
logger = LoggingService()
