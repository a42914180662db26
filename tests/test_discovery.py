from __future__ import annotations

import logging
from typing import Any

import pytest

from mprisctl.core.directory import PlayerDirectory
from mprisctl.core.errors import MalformedReplyError, MethodCallError, TransportUnavailableError
from mprisctl.core.model import Command
from mprisctl.core.query import match
from mprisctl.core.registry import CommandRegistry


class FakeBus:
    def __init__(self, reply: tuple[Any, ...] | Exception) -> None:
        self.reply = reply
        self.list_calls = 0

    def list_names(self) -> tuple[Any, ...]:
        self.list_calls += 1
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    def get_property(self, bus_id: str, object_path: str, interface: str, name: str) -> Any:
        return None

    def call_method(self, bus_id: str, object_path: str, interface: str, method: str) -> None:
        return None


def _registry() -> CommandRegistry:
    return CommandRegistry(
        [Command(id="play", title="Play", subtext="Play {player}", method="Play", icon="media-playback-start")]
    )


def test_refresh_keeps_only_mpris_names_in_reply_order() -> None:
    bus = FakeBus(
        (
            [
                "org.freedesktop.DBus",
                "org.mpris.MediaPlayer2.vlc",
                ":1.42",
                "org.mpris.MediaPlayer2.spotify",
                "org.mpris.MediaPlayer2",
            ],
        )
    )
    directory = PlayerDirectory(bus)

    players = directory.refresh()

    assert [p.bus_id for p in players] == ["org.mpris.MediaPlayer2.vlc", "org.mpris.MediaPlayer2.spotify"]
    assert directory.players == players
    assert directory.last_error is None


def test_refresh_replaces_players_wholesale() -> None:
    bus = FakeBus((["org.mpris.MediaPlayer2.vlc"],))
    directory = PlayerDirectory(bus)
    first = directory.refresh()

    bus.reply = (["org.mpris.MediaPlayer2.vlc", "org.mpris.MediaPlayer2.mpv"],)
    second = directory.refresh()

    assert len(second) == 2
    assert all(p is not first[0] for p in second)
    assert isinstance(directory.players, tuple)


def test_count_mismatch_yields_no_players(caplog: pytest.LogCaptureFixture) -> None:
    bus = FakeBus((["org.mpris.MediaPlayer2.vlc"], ["extra"]))
    directory = PlayerDirectory(bus)

    with caplog.at_level(logging.ERROR, logger="mprisctl.core.directory"):
        players = directory.refresh()

    assert players == ()
    assert isinstance(directory.last_error, MalformedReplyError)
    assert "Expected 1 argument" in caplog.text
    assert "Got 2" in caplog.text
    assert match("", _registry(), directory.players) == []
    assert match("play", _registry(), directory.players) == []


@pytest.mark.parametrize(
    "reply",
    [
        (None,),
        ([],),
        ("org.mpris.MediaPlayer2.vlc",),
        ([1, 2],),
        (),
    ],
)
def test_malformed_reply_is_absorbed(reply: tuple[Any, ...]) -> None:
    directory = PlayerDirectory(FakeBus(reply))
    assert directory.refresh() == ()
    assert isinstance(directory.last_error, MalformedReplyError)


@pytest.mark.parametrize(
    "error",
    [
        TransportUnavailableError("no session bus"),
        MethodCallError("org.freedesktop.DBus.Error.AccessDenied"),
    ],
)
def test_transport_errors_are_absorbed(error: Exception, caplog: pytest.LogCaptureFixture) -> None:
    directory = PlayerDirectory(FakeBus(error))

    with caplog.at_level(logging.ERROR, logger="mprisctl.core.directory"):
        assert directory.refresh() == ()

    assert directory.last_error is error
    assert type(error).__name__ in caplog.text


def test_failed_refresh_drops_previous_players() -> None:
    bus = FakeBus((["org.mpris.MediaPlayer2.vlc"],))
    directory = PlayerDirectory(bus)
    assert len(directory.refresh()) == 1

    bus.reply = TransportUnavailableError("bus went away")
    assert directory.refresh() == ()
    assert directory.players == ()
