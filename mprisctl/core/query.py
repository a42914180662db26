"""Prefix matching of free-text input against commands and live players."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from mprisctl.core.model import Match
from mprisctl.core.player import Player
from mprisctl.core.registry import CommandRegistry

LOGGER = logging.getLogger(__name__)


def score(query: str, command_id: str) -> int:
    """Percentage of the command id covered by the query, rounded half up, capped at 100.

    Exact halves round up, so ``p`` against ``previous`` (12.5) scores 13.
    Truncating scorers and the builtin ``round`` both give 12 there.
    """
    if not command_id:
        return 100
    return min(100, math.floor(100 * len(query) / len(command_id) + 0.5))


def match(query: str, registry: CommandRegistry, players: Sequence[Player]) -> list[Match]:
    """Return (command, player) matches in registry order, then player order.

    Results are not sorted by score; the score is attached for the caller.
    """
    if not players:
        return []

    q = query.lower()
    candidates = [command for command in registry.values() if command.id.startswith(q)]

    for player in players:
        player.reset_cache()

    matches: list[Match] = []
    for command in candidates:
        command_score = score(q, command.id)
        for player in players:
            if command.is_applicable(player):
                matches.append(Match(command=command, player=player, score=command_score))

    LOGGER.debug(
        "Query %r: %d candidate command(s), %d player(s), %d match(es)",
        q,
        len(candidates),
        len(players),
        len(matches),
    )
    return matches


@dataclass(frozen=True)
class QueryContext:
    """Registry plus a player snapshot, evaluated together."""

    registry: CommandRegistry
    players: tuple[Player, ...]

    def match(self, query: str) -> list[Match]:
        return match(query, self.registry, self.players)
