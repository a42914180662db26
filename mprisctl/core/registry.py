"""Ordered, read-only collection of known commands."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from mprisctl.core.errors import CommandValidationError
from mprisctl.core.model import Command


class CommandRegistry(Mapping[str, Command]):
    """Commands keyed by id, iterated in insertion order.

    Insertion order is the tie-break for matches with equal scores.
    """

    def __init__(self, commands: Iterable[Command] = ()) -> None:
        entries: dict[str, Command] = {}
        for command in commands:
            if command.id in entries:
                raise CommandValidationError(f"Duplicate command id '{command.id}'")
            entries[command.id] = command
        self._commands = entries

    def __getitem__(self, command_id: str) -> Command:
        return self._commands[command_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands.values())

    def __repr__(self) -> str:
        return f"CommandRegistry({list(self._commands)!r})"
