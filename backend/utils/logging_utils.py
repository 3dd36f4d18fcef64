import json
import logging
import uuid
import inspect
import os
from datetime import datetime, timezone
from functools import wraps

# Configure the standard logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger('rider-notifications')

SENSITIVE_FIELDS = ['password', 'token', 'key', 'secret', 'auth', 'fcm']


def setup_cloud_logging(log_level=logging.INFO):
    """Attach Google Cloud Logging to the root logger.

    Returns True when Cloud Logging was set up, False when we fell back to
    standard logging.
    """
    logger.setLevel(log_level)
    try:
        from google.cloud import logging as cloud_logging

        client = cloud_logging.Client()
        client.setup_logging(log_level=log_level)
        return True
    except Exception:
        logger.warning("GCP Cloud Logging could not be initialized. Using standard logging.")
        return False


def generate_request_id():
    """Generate a unique request ID for tracing."""
    return str(uuid.uuid4())


class StructuredLogger:
    """Structured logger that formats logs consistently."""

    def __init__(self, service_name, request_id=None, document_id=None):
        self.service_name = service_name
        self.request_id = request_id
        self.document_id = document_id

    def with_context(self, request_id=None, document_id=None):
        """Return a copy of this logger bound to one event."""
        return StructuredLogger(
            self.service_name,
            request_id=request_id or generate_request_id(),
            document_id=document_id,
        )

    def _format_log(self, message, additional_data=None):
        """Format log message as structured data."""
        caller_frame = inspect.currentframe().f_back.f_back
        function_name = caller_frame.f_code.co_name
        file_name = os.path.basename(caller_frame.f_code.co_filename)

        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service_name,
            "request_id": self.request_id,
            "location": f"{file_name}:{function_name}",
            "message": message
        }

        if self.document_id:
            log_data["document_id"] = self.document_id

        if additional_data:
            # Sanitize additional data to remove sensitive info
            log_data["data"] = sanitize_data(additional_data)

        return log_data

    def debug(self, message, data=None):
        """Log a debug message."""
        log_data = self._format_log(message, data)
        logger.debug(json.dumps(log_data, default=str))
        return log_data

    def info(self, message, data=None):
        """Log an info message."""
        log_data = self._format_log(message, data)
        logger.info(json.dumps(log_data, default=str))
        return log_data

    def error(self, message, data=None, exc_info=None):
        """Log an error message."""
        log_data = self._format_log(message, data)
        logger.error(json.dumps(log_data, default=str), exc_info=exc_info)
        return log_data


def sanitize_data(data):
    """Remove sensitive fields from data before logging."""
    if not isinstance(data, dict):
        return data

    sanitized = {}
    for key, value in data.items():
        if any(sensitive in str(key).lower() for sensitive in SENSITIVE_FIELDS):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_data(value)
        else:
            sanitized[key] = value

    return sanitized


def create_logger(service_name):
    """Create a structured logger for a service."""
    return StructuredLogger(service_name)


def log_function_call(log):
    """Decorator to log trigger entries and exits.

    Failures are logged with a traceback and swallowed: a notification
    trigger must never make the host retry the write that fired it.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(event, *args, **kwargs):
            event_log = log.with_context(request_id=getattr(event, 'id', None))
            event_log.info(f"Function {func.__name__} called", {
                "event_type": type(event).__name__
            })

            try:
                result = func(event, *args, **kwargs)
                event_log.info(f"Function {func.__name__} completed", {
                    "outcome": getattr(result, 'value', result)
                })
                return result
            except Exception as e:
                event_log.error(f"Function {func.__name__} failed: {str(e)}", {
                    "error_type": type(e).__name__
                }, exc_info=True)
                return None

        return wrapper
    return decorator
