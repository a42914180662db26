"""Remote player handles and synchronous property access."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from mprisctl.core.errors import PropertyReadError, TransportError
from mprisctl.transports.base import BusTransport

MPRIS_PREFIX = "org.mpris.MediaPlayer2."
MPRIS_OBJECT_PATH = "/org/mpris/MediaPlayer2"
ROOT_INTERFACE = "org.mpris.MediaPlayer2"
PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"
IDENTITY_PROPERTY = f"{ROOT_INTERFACE}.Identity"
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyRead:
    value: Any = None
    error: PropertyReadError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RemoteObjectProperty:
    """One property on one object of one bus endpoint."""

    bus_id: str
    object_path: str
    interface: str
    name: str

    @classmethod
    def from_path(cls, bus_id: str, object_path: str, property_path: str) -> RemoteObjectProperty:
        interface, sep, name = property_path.rpartition(".")
        if not sep or not interface or not name:
            raise ValueError(f"Property path '{property_path}' must be '<interface>.<name>'")
        return cls(bus_id=bus_id, object_path=object_path, interface=interface, name=name)

    def read(self, transport: BusTransport) -> PropertyRead:
        try:
            value = transport.get_property(self.bus_id, self.object_path, self.interface, self.name)
        except PropertyReadError as exc:
            return PropertyRead(error=exc)
        except TransportError as exc:
            return PropertyRead(
                error=PropertyReadError(f"{self.interface}.{self.name} on {self.bus_id}: {exc}")
            )
        return PropertyRead(value=value)


class Player:
    """Handle to one discovered MPRIS endpoint.

    Property reads are cached until `reset_cache()` is called; the query
    engine resets the cache at the start of every pass.
    """

    def __init__(self, bus_id: str, transport: BusTransport) -> None:
        self._bus_id = bus_id
        self._transport = transport
        self._cache: dict[tuple[str, str], PropertyRead] = {}

    @property
    def bus_id(self) -> str:
        return self._bus_id

    @property
    def name(self) -> str:
        identity = self.read(IDENTITY_PROPERTY)
        if identity.ok and identity.value:
            return str(identity.value)
        return self._bus_id.removeprefix(MPRIS_PREFIX)

    def read(self, property_path: str, object_path: str = MPRIS_OBJECT_PATH) -> PropertyRead:
        key = (object_path, property_path)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        result = RemoteObjectProperty.from_path(self._bus_id, object_path, property_path).read(
            self._transport
        )
        if not result.ok:
            LOGGER.debug("Property read failed: %s", result.error)
        self._cache[key] = result
        return result

    def reset_cache(self) -> None:
        self._cache.clear()

    def __repr__(self) -> str:
        return f"Player({self._bus_id!r})"
