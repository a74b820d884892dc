"""
Logging filters that keep QRZ credentials out of log output.
"""

import logging
import re


class SensitiveDataFilter(logging.Filter):
    """Filter to redact sensitive data from log messages."""

    # Query parameters carrying the account password or the session key
    SENSITIVE_PATTERNS = [
        (re.compile(r'([?&;]password=)[^&;\s"]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'([?&;]s=)[^&;\s"]+'), r'\1[REDACTED]'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            msg = str(record.msg)
            if record.args:
                # httpx logs the URL through %-style args
                msg = msg % record.args
                record.args = None
            for pattern, replacement in self.SENSITIVE_PATTERNS:
                msg = pattern.sub(replacement, msg)
            record.msg = msg
        return True


def install_httpx_filter() -> SensitiveDataFilter:
    """Attach a single SensitiveDataFilter to the httpx logger and return it."""
    httpx_logger = logging.getLogger("httpx")
    for existing in httpx_logger.filters:
        if isinstance(existing, SensitiveDataFilter):
            return existing
    log_filter = SensitiveDataFilter()
    httpx_logger.addFilter(log_filter)
    return log_filter
