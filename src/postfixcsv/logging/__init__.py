"""Structured event logging for postfixcsv.

Provides the event schema, a filesystem NDJSON sink, and safe emit
helpers that never raise.
"""

from postfixcsv.logging.events import (
    EventLevel,
    EventType,
    PostfixEvent,
    configure,
    emit,
    emit_error,
    emit_info,
    emit_warning,
    get_sink,
)
from postfixcsv.logging.sink import EventSink

__all__ = [
    "EventLevel",
    "EventSink",
    "EventType",
    "PostfixEvent",
    "configure",
    "emit",
    "emit_error",
    "emit_info",
    "emit_warning",
    "get_sink",
]
