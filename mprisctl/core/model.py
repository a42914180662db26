"""Core data models used across loader, query engine, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from mprisctl.core.player import MPRIS_OBJECT_PATH, Player


@dataclass(frozen=True)
class EqualsPredicate:
    property_path: str
    expected: Any
    invert: bool = False
    object_path: str = MPRIS_OBJECT_PATH


@dataclass(frozen=True)
class FlagPredicate:
    property_path: str
    invert: bool = False
    object_path: str = MPRIS_OBJECT_PATH


Predicate = Union[EqualsPredicate, FlagPredicate]


def evaluate(predicate: Predicate | None, player: Player) -> bool:
    """Decide whether a predicate holds for a player.

    An unreadable property never satisfies a predicate, whatever `invert` says.
    """
    if predicate is None:
        return True
    read = player.read(predicate.property_path, predicate.object_path)
    if not read.ok:
        return False
    if isinstance(predicate, EqualsPredicate):
        outcome = read.value == predicate.expected
    elif isinstance(predicate, FlagPredicate):
        outcome = bool(read.value)
    else:
        raise TypeError(f"Unknown predicate type {type(predicate).__name__}")
    return outcome != predicate.invert


@dataclass(frozen=True)
class Command:
    id: str
    title: str
    subtext: str
    method: str
    icon: str
    predicate: Predicate | None = None

    def is_applicable(self, player: Player) -> bool:
        return evaluate(self.predicate, player)

    def describe(self, player: Player) -> str:
        return self.subtext.format(player=player.name)


@dataclass(frozen=True)
class ResultItem:
    id: str
    title: str
    subtext: str
    icon: str
    score: int
    bus_id: str


@dataclass(frozen=True)
class Match:
    command: Command
    player: Player
    score: int

    def to_item(self) -> ResultItem:
        return ResultItem(
            id=self.command.id,
            title=self.command.title,
            subtext=self.command.describe(self.player),
            icon=self.command.icon,
            score=self.score,
            bus_id=self.player.bus_id,
        )
