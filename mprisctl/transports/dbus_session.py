"""D-Bus transport implementation using dbus-python."""

from __future__ import annotations

from typing import Any

from mprisctl.core.errors import (
    MethodCallError,
    PropertyReadError,
    TransportUnavailableError,
)

BUS_DAEMON_NAME = "org.freedesktop.DBus"
BUS_DAEMON_PATH = "/org/freedesktop/DBus"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"


def _reply_args(reply: Any) -> tuple[Any, ...]:
    # dbus-python unwraps single-argument replies and returns None for empty ones.
    if reply is None:
        return ()
    if type(reply) is tuple:
        return reply
    return (reply,)


class DBusTransport:
    def __init__(self, *, bus: str = "session", timeout_s: float = 2.0) -> None:
        if bus not in ("session", "system"):
            raise ValueError(f"Unsupported bus '{bus}', expected 'session' or 'system'")
        self.bus = bus
        self.timeout_s = timeout_s
        self._connection: Any = None
        self._dbus: Any = None

    def _connect(self) -> Any:
        if self._connection is not None:
            return self._connection
        try:
            import dbus  # type: ignore
        except ImportError as exc:
            raise TransportUnavailableError(
                "D-Bus transport requires 'dbus-python'. Install the 'dbus' extra and retry."
            ) from exc

        try:
            self._connection = dbus.SystemBus() if self.bus == "system" else dbus.SessionBus()
        except dbus.exceptions.DBusException as exc:
            raise TransportUnavailableError(f"Could not connect to the {self.bus} bus: {exc}") from exc
        self._dbus = dbus
        return self._connection

    def _call(
        self,
        bus_id: str,
        object_path: str,
        interface: str,
        method: str,
        signature: str = "",
        args: tuple[Any, ...] = (),
    ) -> Any:
        connection = self._connect()
        return connection.call_blocking(
            bus_id,
            object_path,
            interface,
            method,
            signature,
            args,
            timeout=self.timeout_s,
        )

    def list_names(self) -> tuple[Any, ...]:
        try:
            reply = self._call(BUS_DAEMON_NAME, BUS_DAEMON_PATH, BUS_DAEMON_NAME, "ListNames")
        except TransportUnavailableError:
            raise
        except self._dbus.exceptions.DBusException as exc:
            raise MethodCallError(f"ListNames failed: {exc.get_dbus_message() or exc}") from exc
        return _reply_args(reply)

    def get_property(self, bus_id: str, object_path: str, interface: str, name: str) -> Any:
        try:
            return self._call(
                bus_id,
                object_path,
                PROPERTIES_INTERFACE,
                "Get",
                "ss",
                (interface, name),
            )
        except TransportUnavailableError as exc:
            raise PropertyReadError(str(exc)) from exc
        except self._dbus.exceptions.DBusException as exc:
            raise PropertyReadError(
                f"Reading {interface}.{name} on {bus_id} failed: {exc.get_dbus_message() or exc}"
            ) from exc

    def call_method(self, bus_id: str, object_path: str, interface: str, method: str) -> None:
        try:
            self._call(bus_id, object_path, interface, method)
        except TransportUnavailableError:
            raise
        except self._dbus.exceptions.DBusException as exc:
            raise MethodCallError(
                f"{interface}.{method} on {bus_id} failed: {exc.get_dbus_message() or exc}"
            ) from exc
