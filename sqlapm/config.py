"""Configuration objects for connection instrumentation."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlapm.subscribers import Subscriber

__all__ = ("InstrumentationConfig",)


@dataclass(slots=True)
class InstrumentationConfig:
    """Subscribers and dispatch behaviour applied to an instrumented connection.

    Attributes:
        subscribers: Registered on the connection in this order.
        log_events: Append a :class:`~sqlapm.observability.LoggingSubscriber`
            after the configured subscribers.
        isolate_subscriber_errors: Log and skip a subscriber whose handler raises
            instead of letting the exception abort the database call.
    """

    subscribers: "tuple[Subscriber, ...] | None" = None
    log_events: bool = False
    isolate_subscriber_errors: bool = False

    def __post_init__(self) -> None:
        if self.subscribers is not None:
            self.subscribers = tuple(self.subscribers)

    def copy(self) -> "InstrumentationConfig":
        """Return a copy that does not share the subscriber tuple."""

        return InstrumentationConfig(
            subscribers=tuple(self.subscribers) if self.subscribers is not None else None,
            log_events=self.log_events,
            isolate_subscriber_errors=self.isolate_subscriber_errors,
        )

    def with_subscribers(self, subscribers: "Iterable[Subscriber]") -> "InstrumentationConfig":
        """Return a copy with ``subscribers`` appended."""

        merged = self.copy()
        merged.subscribers = (*(merged.subscribers or ()), *subscribers)
        return merged

    @classmethod
    def merge(
        cls, base_config: "InstrumentationConfig | None", override_config: "InstrumentationConfig | None"
    ) -> "InstrumentationConfig":
        """Merge a shared base configuration with a connection level override.

        Subscribers are concatenated (base first); boolean flags are enabled if
        either side enables them.
        """

        if base_config is None and override_config is None:
            return cls()

        base = base_config.copy() if base_config else cls()
        if override_config is None:
            return base

        if override_config.subscribers:
            base = base.with_subscribers(override_config.subscribers)

        base.log_events = base.log_events or override_config.log_events
        base.isolate_subscriber_errors = base.isolate_subscriber_errors or override_config.isolate_subscriber_errors
        return base
