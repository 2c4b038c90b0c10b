"""Ready-made subscribers for logging and inspecting lifecycle events."""

from sqlapm.observability._logging import LoggingSubscriber, format_event
from sqlapm.observability._recorder import EventRecorder

__all__ = ("EventRecorder", "LoggingSubscriber", "format_event")
