"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import logging

from mprisctl.core.command_loader import load_commands
from mprisctl.core.directory import PlayerDirectory
from mprisctl.core.errors import MatchSelectionError
from mprisctl.core.model import Command, Match, ResultItem
from mprisctl.core.player import MPRIS_OBJECT_PATH, PLAYER_INTERFACE, Player
from mprisctl.core.query import QueryContext
from mprisctl.core.registry import CommandRegistry
from mprisctl.transports.base import BusTransport
from mprisctl.transports.dbus_session import DBusTransport

LOGGER = logging.getLogger(__name__)


class MprisService:
    def __init__(
        self,
        *,
        transport: BusTransport | None = None,
        registry: CommandRegistry | None = None,
    ) -> None:
        if registry is None:
            loaded = load_commands()
            self.registry = loaded.registry
            self.load_warnings = loaded.warnings
        else:
            self.registry = registry
            self.load_warnings = ()
        self.transport = transport or DBusTransport()
        self.directory = PlayerDirectory(self.transport)

    @property
    def runtime_warnings(self) -> tuple[str, ...]:
        error = self.directory.last_error
        if error is None:
            return ()
        return (f"Player discovery failed: {error}",)

    def refresh(self) -> tuple[Player, ...]:
        return self.directory.refresh()

    def context(self) -> QueryContext:
        return QueryContext(registry=self.registry, players=self.directory.players)

    def list_commands(self) -> list[Command]:
        return list(self.registry.values())

    def list_players(self) -> list[Player]:
        return list(self.directory.players)

    def query(self, text: str) -> list[Match]:
        return self.context().match(text)

    def items(self, text: str) -> list[ResultItem]:
        return [m.to_item() for m in self.query(text)]

    def resolve(self, text: str, player_hint: str | None = None) -> Match:
        matches = self.query(text)

        if player_hint:
            hint = player_hint.lower()
            matches = [
                m
                for m in matches
                if hint in m.player.bus_id.lower() or hint in m.player.name.lower()
            ]
            if not matches:
                raise MatchSelectionError(f"No applicable command for '{text}' on a player matching '{player_hint}'")

        if not matches:
            if not self.directory.players:
                raise MatchSelectionError("No MPRIS players found. Start a media player and retry.")
            raise MatchSelectionError(f"No applicable command matches '{text}'")

        best_score = max(m.score for m in matches)
        candidates = [m for m in matches if m.score == best_score]
        exact = [m for m in candidates if m.command.id == text.lower()]
        if exact:
            candidates = exact

        if len(candidates) > 1:
            candidate_desc = ", ".join(f"{m.command.id} on {m.player.bus_id}" for m in candidates)
            raise MatchSelectionError(
                f"Multiple candidate matches found: {candidate_desc}. Type more of the command or use --player."
            )

        return candidates[0]

    def execute(self, match: Match) -> None:
        LOGGER.debug("Invoking %s on %s", match.command.method, match.player.bus_id)
        self.transport.call_method(
            match.player.bus_id,
            MPRIS_OBJECT_PATH,
            PLAYER_INTERFACE,
            match.command.method,
        )

    def run(self, text: str, player_hint: str | None = None) -> Match:
        match = self.resolve(text, player_hint=player_hint)
        self.execute(match)
        return match
