import pytest

from sqlapm.events import ExecutionStartsEvent, PrepareEvent, TransactionBeginEvent
from sqlapm.subscribers import (
    ExecutionFailedSubscriber,
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    PrepareSubscriber,
    Subscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
)

INTERFACES = (
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    ExecutionFailedSubscriber,
    PrepareSubscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
)


@pytest.mark.parametrize("interface", INTERFACES, ids=[interface.__name__ for interface in INTERFACES])
def test_interfaces_are_subscribers(interface: type) -> None:
    assert issubclass(interface, Subscriber)


@pytest.mark.parametrize("interface", INTERFACES, ids=[interface.__name__ for interface in INTERFACES])
def test_interfaces_require_their_handler(interface: type) -> None:
    incomplete = type("Incomplete", (interface,), {})

    with pytest.raises(TypeError):
        incomplete()


@pytest.mark.parametrize("interface", INTERFACES, ids=[interface.__name__ for interface in INTERFACES])
def test_interfaces_declare_exactly_one_handler(interface: type) -> None:
    assert len(interface.__abstractmethods__) == 1


def test_subscriber_may_combine_interfaces() -> None:
    class Combined(PrepareSubscriber, ExecutionStartsSubscriber):
        def __init__(self) -> None:
            self.seen: list[str] = []

        def prepare(self, event: PrepareEvent) -> None:
            self.seen.append(f"prepare:{event.query}")

        def execution_starts(self, event: ExecutionStartsEvent) -> None:
            self.seen.append(f"starts:{event.query}")

    subscriber = Combined()
    PrepareEvent("SELECT ?").deliver(subscriber)
    ExecutionStartsEvent("SELECT 1").deliver(subscriber)
    TransactionBeginEvent().deliver(subscriber)

    assert subscriber.seen == ["prepare:SELECT ?", "starts:SELECT 1"]


def test_bare_subscriber_can_be_instantiated() -> None:
    class Marker(Subscriber):
        pass

    assert isinstance(Marker(), Subscriber)
