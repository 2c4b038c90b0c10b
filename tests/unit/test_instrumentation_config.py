"""Tests for InstrumentationConfig copy and merge behaviour."""

import pytest

from sqlapm.config import InstrumentationConfig
from sqlapm.observability import EventRecorder


def test_defaults() -> None:
    config = InstrumentationConfig()

    assert config.subscribers is None
    assert config.log_events is False
    assert config.isolate_subscriber_errors is False


def test_subscribers_are_stored_as_tuple() -> None:
    recorder = EventRecorder()
    config = InstrumentationConfig(subscribers=[recorder])  # type: ignore[arg-type]

    assert config.subscribers == (recorder,)


def test_copy_and_equality() -> None:
    config = InstrumentationConfig(subscribers=(EventRecorder(),), log_events=True)
    clone = config.copy()

    assert clone == config
    assert clone is not config


def test_config_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(InstrumentationConfig())


def test_with_subscribers_appends_without_mutating() -> None:
    first, second = EventRecorder(), EventRecorder()
    config = InstrumentationConfig(subscribers=(first,))

    extended = config.with_subscribers([second])

    assert extended.subscribers == (first, second)
    assert config.subscribers == (first,)


def test_merge_concatenates_subscribers_base_first() -> None:
    first, second = EventRecorder(), EventRecorder()

    merged = InstrumentationConfig.merge(
        InstrumentationConfig(subscribers=(first,)),
        InstrumentationConfig(subscribers=(second,), isolate_subscriber_errors=True),
    )

    assert merged.subscribers == (first, second)
    assert merged.isolate_subscriber_errors is True
    assert merged.log_events is False


def test_merge_flags_are_sticky() -> None:
    merged = InstrumentationConfig.merge(InstrumentationConfig(log_events=True), InstrumentationConfig())

    assert merged.log_events is True


@pytest.mark.parametrize(
    ("base", "override"),
    [(None, None), (InstrumentationConfig(), None), (None, InstrumentationConfig())],
)
def test_merge_with_missing_side(
    base: "InstrumentationConfig | None", override: "InstrumentationConfig | None"
) -> None:
    assert InstrumentationConfig.merge(base, override) == InstrumentationConfig()


def test_merge_does_not_mutate_inputs() -> None:
    base = InstrumentationConfig(subscribers=(EventRecorder(),))

    InstrumentationConfig.merge(base, InstrumentationConfig(subscribers=(EventRecorder(),), log_events=True))

    assert len(base.subscribers or ()) == 1
    assert base.log_events is False
