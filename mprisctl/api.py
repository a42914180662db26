"""Stable public API for building tooling on top of mprisctl.

This module is the supported integration surface for third-party callers
(launchers, status bars, scripts). Avoid importing from private/internal
modules unless intentionally depending on non-stable internals.
"""

from __future__ import annotations

from mprisctl.core.errors import (
    CommandLoadError,
    CommandValidationError,
    MalformedReplyError,
    MatchSelectionError,
    MethodCallError,
    MprisctlError,
    PropertyReadError,
    TransportError,
    TransportUnavailableError,
)
from mprisctl.core.model import (
    Command,
    EqualsPredicate,
    FlagPredicate,
    Match,
    ResultItem,
)
from mprisctl.core.player import Player
from mprisctl.core.query import QueryContext, match, score
from mprisctl.core.registry import CommandRegistry
from mprisctl.core.service import MprisService
from mprisctl.transports.base import BusTransport
from mprisctl.transports.dbus_session import DBusTransport

__all__ = [
    "MprisctlError",
    "CommandLoadError",
    "CommandValidationError",
    "MatchSelectionError",
    "TransportError",
    "TransportUnavailableError",
    "MalformedReplyError",
    "MethodCallError",
    "PropertyReadError",
    "Command",
    "CommandRegistry",
    "EqualsPredicate",
    "FlagPredicate",
    "Match",
    "Player",
    "ResultItem",
    "QueryContext",
    "match",
    "score",
    "BusTransport",
    "DBusTransport",
    "Client",
]


class Client:
    """Public client for interacting with mprisctl core capabilities.

    A `Client` wraps command loading, player discovery and query matching
    behind a stable API. Call `refresh()` at the start of each session; query
    results are computed against the players found by the latest refresh.
    """

    def __init__(
        self,
        *,
        transport: BusTransport | None = None,
        registry: CommandRegistry | None = None,
    ) -> None:
        self._service = MprisService(transport=transport, registry=registry)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    @property
    def runtime_warnings(self) -> tuple[str, ...]:
        return self._service.runtime_warnings

    @property
    def registry(self) -> CommandRegistry:
        return self._service.registry

    def refresh(self) -> list[Player]:
        return list(self._service.refresh())

    def list_commands(self) -> list[Command]:
        return self._service.list_commands()

    def list_players(self) -> list[Player]:
        return self._service.list_players()

    def query(self, text: str) -> list[Match]:
        return self._service.query(text)

    def items(self, text: str) -> list[ResultItem]:
        return self._service.items(text)

    def resolve(self, text: str, *, player_hint: str | None = None) -> Match:
        return self._service.resolve(text, player_hint=player_hint)

    def execute(self, match: Match) -> None:
        self._service.execute(match)

    def run(self, text: str, *, player_hint: str | None = None) -> Match:
        return self._service.run(text, player_hint=player_hint)
