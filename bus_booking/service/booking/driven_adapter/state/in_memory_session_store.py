"""
In-memory Session Store

Keeps serialized snapshots per session id. Snapshots are stored as orjson bytes, not
as live objects, so a restored session never shares mutable passengers with the one
that saved it.
"""

from typing import Optional

import anyio

from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.app.interface.i_session_store import ISessionStore
from bus_booking.service.booking.domain.value_object.session_snapshot import SessionSnapshot


class InMemorySessionStore(ISessionStore):
    def __init__(self) -> None:
        self._snapshots: dict[str, bytes] = {}
        self._lock = anyio.Lock()

    async def save(self, *, session_id: str, snapshot: SessionSnapshot) -> None:
        async with self._lock:
            self._snapshots[session_id] = snapshot.to_json()
        Logger.base.debug(f'[SESSION-STORE] Saved {session_id} at {snapshot.step}')

    async def load(self, *, session_id: str) -> Optional[SessionSnapshot]:
        async with self._lock:
            raw = self._snapshots.get(session_id)
        return SessionSnapshot.from_json(raw) if raw is not None else None

    async def delete(self, *, session_id: str) -> bool:
        async with self._lock:
            return self._snapshots.pop(session_id, None) is not None
