"""Transport interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class BusTransport(Protocol):
    def list_names(self) -> tuple[Any, ...]:
        """Return the raw reply arguments of the bus-wide ListNames call."""

    def get_property(self, bus_id: str, object_path: str, interface: str, name: str) -> Any:
        """Read one property from a remote object."""

    def call_method(self, bus_id: str, object_path: str, interface: str, method: str) -> None:
        """Invoke a no-argument method on a remote object."""
