# siteplacement/logging_filters.py
from __future__ import annotations
import logging
from django.core.exceptions import DisallowedHost


class IgnoreDisallowedHost(logging.Filter):
    """Écarte de la console les traces DisallowedHost (Host non autorisé, scans de bots)."""

    def filter(self, record: logging.LogRecord) -> bool:
        exc = record.exc_info
        return not (exc and isinstance(exc[1], DisallowedHost))
