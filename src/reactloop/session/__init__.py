"""Event wire between a run and its observers."""

from reactloop.session.wire import EventType, Wire, WireEvent, drain

__all__ = ["EventType", "Wire", "WireEvent", "drain"]
