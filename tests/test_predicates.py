from __future__ import annotations

from typing import Any

import pytest

from mprisctl.core.errors import MethodCallError, PropertyReadError
from mprisctl.core.model import Command, EqualsPredicate, FlagPredicate, evaluate
from mprisctl.core.player import Player, RemoteObjectProperty

BUS_ID = "org.mpris.MediaPlayer2.spotify"
STATUS = "org.mpris.MediaPlayer2.Player.PlaybackStatus"
CAN_PREVIOUS = "org.mpris.MediaPlayer2.Player.CanGoPrevious"


class FakeBus:
    def __init__(self, props: dict[str, Any], error: Exception | None = None) -> None:
        self.props = props
        self.error = error
        self.calls: list[tuple[str, str, str, str]] = []

    def list_names(self) -> tuple[Any, ...]:
        return ([BUS_ID],)

    def get_property(self, bus_id: str, object_path: str, interface: str, name: str) -> Any:
        self.calls.append((bus_id, object_path, interface, name))
        if self.error is not None:
            raise self.error
        try:
            return self.props[f"{interface}.{name}"]
        except KeyError:
            raise PropertyReadError(f"{interface}.{name} not found") from None

    def call_method(self, bus_id: str, object_path: str, interface: str, method: str) -> None:
        raise AssertionError("predicates must not call methods")


def test_property_path_splits_at_last_dot() -> None:
    prop = RemoteObjectProperty.from_path(BUS_ID, "/org/mpris/MediaPlayer2", STATUS)
    assert prop.interface == "org.mpris.MediaPlayer2.Player"
    assert prop.name == "PlaybackStatus"


def test_property_path_without_interface_rejected() -> None:
    with pytest.raises(ValueError):
        RemoteObjectProperty.from_path(BUS_ID, "/org/mpris/MediaPlayer2", "PlaybackStatus")


def test_read_returns_explicit_failure() -> None:
    bus = FakeBus({}, error=MethodCallError("name has no owner"))
    prop = RemoteObjectProperty.from_path(BUS_ID, "/org/mpris/MediaPlayer2", STATUS)

    result = prop.read(bus)

    assert not result.ok
    assert isinstance(result.error, PropertyReadError)
    assert "PlaybackStatus" in str(result.error)


@pytest.mark.parametrize(
    ("status", "invert", "expected"),
    [
        ("Playing", False, True),
        ("Paused", False, False),
        ("Playing", True, False),
        ("Stopped", True, True),
    ],
)
def test_equals_predicate(status: str, invert: bool, expected: bool) -> None:
    player = Player(BUS_ID, FakeBus({STATUS: status}))
    assert evaluate(EqualsPredicate(STATUS, "Playing", invert=invert), player) is expected


@pytest.mark.parametrize(
    ("flag", "invert", "expected"),
    [
        (True, False, True),
        (False, False, False),
        (True, True, False),
        (False, True, True),
    ],
)
def test_flag_predicate(flag: bool, invert: bool, expected: bool) -> None:
    player = Player(BUS_ID, FakeBus({CAN_PREVIOUS: flag}))
    assert evaluate(FlagPredicate(CAN_PREVIOUS, invert=invert), player) is expected


@pytest.mark.parametrize(
    "predicate",
    [
        EqualsPredicate(STATUS, "Playing"),
        EqualsPredicate(STATUS, "Playing", invert=True),
        FlagPredicate(CAN_PREVIOUS),
        FlagPredicate(CAN_PREVIOUS, invert=True),
    ],
)
def test_unreadable_property_fails_closed(predicate) -> None:
    player = Player(BUS_ID, FakeBus({}))
    assert evaluate(predicate, player) is False


def test_missing_predicate_is_always_applicable() -> None:
    bus = FakeBus({})
    player = Player(BUS_ID, bus)
    assert evaluate(None, player) is True
    assert bus.calls == []


def test_command_describe_uses_identity_then_bus_suffix() -> None:
    command = Command(
        id="pause",
        title="Pause",
        subtext="Pause {player}",
        method="Pause",
        icon="media-playback-pause",
    )
    named = Player(BUS_ID, FakeBus({"org.mpris.MediaPlayer2.Identity": "Spotify"}))
    anonymous = Player("org.mpris.MediaPlayer2.mpv.instance42", FakeBus({}))

    assert command.describe(named) == "Pause Spotify"
    assert command.describe(anonymous) == "Pause mpv.instance42"


def test_player_bus_id_is_read_only() -> None:
    player = Player(BUS_ID, FakeBus({}))
    with pytest.raises(AttributeError):
        player.bus_id = "org.mpris.MediaPlayer2.other"  # type: ignore[misc]
