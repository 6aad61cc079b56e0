"""Session Store Interface - persists session snapshots across reloads or restarts"""

from abc import ABC, abstractmethod
from typing import Optional

from bus_booking.service.booking.domain.value_object.session_snapshot import SessionSnapshot


class ISessionStore(ABC):
    @abstractmethod
    async def save(self, *, session_id: str, snapshot: SessionSnapshot) -> None:
        pass

    @abstractmethod
    async def load(self, *, session_id: str) -> Optional[SessionSnapshot]:
        pass

    @abstractmethod
    async def delete(self, *, session_id: str) -> bool:
        pass
