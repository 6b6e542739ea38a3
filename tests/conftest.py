from __future__ import annotations

import os
import socket
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

import pytest

# Ensure the app runs in a unit-test-safe configuration during pytest collection.
# This keeps a developer's local .env (ports, origins, log level) out of unit tests.
os.environ.setdefault("APP_ENV", "test")


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. "
        "Mark the test with @pytest.mark.integration/@pytest.mark.network or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    """Prevent accidental outbound network calls in unit tests."""

    if os.getenv("ALLOW_NETWORK") == "1":
        return

    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


@dataclass
class Delivery:
    sid: str
    event: str
    payload: dict[str, Any]


class RecordingTransport:
    """In-memory rooms that record every delivery per recipient."""

    def __init__(self) -> None:
        self.rooms: dict[str, set[str]] = defaultdict(set)
        self.deliveries: list[Delivery] = []

    async def emit(self, sid: str, event: str, payload: dict[str, Any]) -> None:
        self.deliveries.append(Delivery(sid, event, payload))

    async def broadcast_to_room(
        self,
        room: str,
        event: str,
        payload: dict[str, Any],
        *,
        skip_sid: str | None = None,
    ) -> None:
        for sid in sorted(self.rooms.get(room, ())):
            if sid != skip_sid:
                self.deliveries.append(Delivery(sid, event, payload))

    async def join_room(self, sid: str, room: str) -> None:
        self.rooms[room].add(sid)

    async def leave_room(self, sid: str, room: str) -> None:
        members = self.rooms.get(room)
        if members is None:
            return
        members.discard(sid)
        if not members:
            del self.rooms[room]

    def drop(self, sid: str) -> None:
        """Forget `sid` everywhere, as a closed socket would."""

        for room in list(self.rooms):
            self.rooms[room].discard(sid)
            if not self.rooms[room]:
                del self.rooms[room]

    def received(self, sid: str, event: str | None = None) -> list[dict[str, Any]]:
        return [
            d.payload
            for d in self.deliveries
            if d.sid == sid and (event is None or d.event == event)
        ]

    def events_for(self, sid: str) -> list[str]:
        return [d.event for d in self.deliveries if d.sid == sid]

    def clear(self) -> None:
        self.deliveries.clear()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
