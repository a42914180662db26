"""Command loading and validation for YAML-based mprisctl command files."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from string import Formatter
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from mprisctl.core.errors import CommandLoadError, CommandValidationError
from mprisctl.core.model import Command, EqualsPredicate, FlagPredicate, Predicate
from mprisctl.core.player import MPRIS_OBJECT_PATH
from mprisctl.core.registry import CommandRegistry

_PLAYER_FIELD = "player"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise CommandValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedCommands:
    registry: CommandRegistry
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("mprisctl.schemas").joinpath("command.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _command_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "mprisctl/commands", xdg_data / "mprisctl/commands"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CommandLoadError(f"Could not read command file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise CommandValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise CommandValidationError(f"Command file {path} must contain a mapping at root")
    return loaded


def _normalize_bool(value: Any, *, context: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise CommandValidationError(f"{context} must be boolean true/false")


def _check_subtext(subtext: str, *, context: str) -> None:
    # Literal braces must be doubled; the only replacement field is {player}.
    try:
        fields = [
            (name, spec, conversion)
            for _, name, spec, conversion in Formatter().parse(subtext)
            if name is not None
        ]
    except ValueError as exc:
        raise CommandValidationError(f"{context} is not a valid template: {exc}") from exc
    if fields != [(_PLAYER_FIELD, "", None)]:
        raise CommandValidationError(
            f"{context} must contain exactly one '{{{_PLAYER_FIELD}}}' placeholder and no other fields"
        )


def _build_predicate(when: dict[str, Any] | None, *, context: str) -> Predicate | None:
    if when is None:
        return None
    invert = _normalize_bool(when.get("invert", False), context=f"{context}.invert")
    object_path = when.get("object_path", MPRIS_OBJECT_PATH)
    if "flag" in when:
        # flag: false asks for a false capability, which is an inverted truthiness check
        wanted = _normalize_bool(when["flag"], context=f"{context}.flag")
        return FlagPredicate(
            property_path=when["property"],
            invert=invert != (not wanted),
            object_path=object_path,
        )
    return EqualsPredicate(
        property_path=when["property"],
        expected=when["equals"],
        invert=invert,
        object_path=object_path,
    )


def _build_commands(doc: dict[str, Any], source: Path | Traversable) -> list[Command]:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise CommandValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    commands: list[Command] = []
    seen: set[str] = set()
    for entry in doc["commands"]:
        command_id = entry["id"]
        if command_id in seen:
            raise CommandValidationError(f"Command '{command_id}' defined twice in {source}")
        seen.add(command_id)
        _check_subtext(entry["subtext"], context=f"{command_id}.subtext")
        commands.append(
            Command(
                id=command_id,
                title=entry["title"],
                subtext=entry["subtext"],
                method=entry["method"],
                icon=entry["icon"],
                predicate=_build_predicate(entry.get("when"), context=f"{command_id}.when"),
            )
        )
    return commands


def _iter_packaged_command_paths() -> list[Traversable]:
    command_root = resources.files("mprisctl.commands")
    return [item for item in command_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_command_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _command_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_commands() -> LoadedCommands:
    commands: dict[str, Command] = {}
    origins: dict[str, str] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_command_paths(), key=lambda p: p.name):
        for command in _build_commands(_read_yaml(path), path):
            commands[command.id] = command
            origins[command.id] = "packaged command"

    for path in _iter_user_command_paths():
        for command in _build_commands(_read_yaml(path), path):
            if command.id in commands:
                warning = f"User command '{command.id}' from {path} overrides {origins[command.id]}"
                LOGGER.warning(warning)
                warnings.append(warning)
            commands[command.id] = command
            origins[command.id] = f"user command from {path}"

    return LoadedCommands(registry=CommandRegistry(commands.values()), warnings=tuple(warnings))
