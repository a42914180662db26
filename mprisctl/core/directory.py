"""Discovery of MPRIS players on the bus."""

from __future__ import annotations

import logging
import threading
from typing import Any

from mprisctl.core.errors import MalformedReplyError, TransportError
from mprisctl.core.player import MPRIS_PREFIX, Player
from mprisctl.transports.base import BusTransport

LOGGER = logging.getLogger(__name__)


def _endpoint_names(reply_args: tuple[Any, ...]) -> list[str]:
    if len(reply_args) != 1:
        raise MalformedReplyError(f"Expected 1 argument for ListNames reply. Got {len(reply_args)}")
    names = reply_args[0]
    if names is None:
        raise MalformedReplyError("ListNames reply argument is null")
    if isinstance(names, (str, bytes)) or not isinstance(names, (list, tuple)):
        raise MalformedReplyError(
            f"ListNames reply argument is not a string list (got {type(names).__name__})"
        )
    if not all(isinstance(name, str) for name in names):
        raise MalformedReplyError("ListNames reply argument contains non-string entries")
    if not names:
        raise MalformedReplyError("ListNames reply argument is empty")
    return [str(name) for name in names]


class PlayerDirectory:
    """Owns the player set of the current session.

    Every `refresh()` is a full rescan; the previous players are dropped
    wholesale and the new set is published as one immutable snapshot.
    """

    def __init__(self, transport: BusTransport) -> None:
        self._transport = transport
        self._players: tuple[Player, ...] = ()
        self._lock = threading.Lock()
        self.last_error: TransportError | None = None

    @property
    def players(self) -> tuple[Player, ...]:
        return self._players

    def refresh(self) -> tuple[Player, ...]:
        with self._lock:
            players: tuple[Player, ...] = ()
            try:
                names = _endpoint_names(self._transport.list_names())
            except TransportError as exc:
                LOGGER.error("D-Bus error (%s): %s", type(exc).__name__, exc)
                self.last_error = exc
            else:
                self.last_error = None
                players = tuple(
                    Player(name, self._transport) for name in names if name.startswith(MPRIS_PREFIX)
                )
                LOGGER.debug("Discovered %d player(s) among %d bus name(s)", len(players), len(names))
            self._players = players
            return players
