from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange, quantize_amount


@dataclass
class Pinged(DomainEvent):
    target: str


@dataclass
class Ping:
    target: str


def test_command_goes_to_its_single_handler():
    bus = MessageBus()
    handler = lambda command: f"pong {command.target}"  # noqa: E731
    bus.register_command_handler(Ping, handler)
    bus.register_command_handler(Ping, handler)

    assert bus.handle_command(Ping("alpha")) == "pong alpha"
    with pytest.raises(ValueError):
        bus.register_command_handler(Ping, lambda command: None)


def test_unhandled_command_is_an_error():
    with pytest.raises(LookupError):
        MessageBus().handle_command(Ping("alpha"))


def test_command_errors_reach_the_caller():
    bus = MessageBus()

    def explode(command):
        raise RuntimeError("boom")

    bus.register_command_handler(Ping, explode)
    with pytest.raises(RuntimeError):
        bus.handle_command(Ping("alpha"))


def test_failing_event_handler_does_not_stop_others():
    bus = MessageBus()
    seen = []

    def explode(event):
        raise RuntimeError("boom")

    bus.register_event_handler(Pinged, explode)
    bus.register_event_handler(Pinged, seen.append)
    bus.register_event_handler(Pinged, seen.append)

    event = Pinged(target="alpha")
    bus.publish_events([event])

    assert seen == [event]


def test_quantize_amount_rounds_half_up():
    assert quantize_amount(Decimal("0.005")) == Decimal("0.01")
    assert quantize_amount(2.675) == Decimal("2.68")
    assert quantize_amount(10) == Decimal("10.00")


def test_date_range_nights():
    stay = DateRange(date(2030, 1, 30), date(2030, 2, 2))

    assert len(stay) == 3
    assert list(stay.days())[-1] == date(2030, 2, 1)
    with pytest.raises(ValueError):
        DateRange(date(2030, 2, 2), date(2030, 2, 2))
