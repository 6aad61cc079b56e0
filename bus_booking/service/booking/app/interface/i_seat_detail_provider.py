"""
Seat Detail Provider Interface

Read side of the seat map: raw seat records exactly as the ticketing API returns
them. Normalization is not the provider's concern.
"""

from abc import ABC, abstractmethod
from typing import Any


class ISeatDetailProvider(ABC):
    @abstractmethod
    async def fetch(self, bus_number: str) -> list[dict[str, Any]]:
        """
        Fetch raw seat records for one bus

        Args:
            bus_number: Bus identifier as shown in search results

        Returns:
            List of raw seat dicts (field names vary by feed)

        Raises:
            SeatFetchError: Network failure or a payload that is not a seat list
        """
        pass
