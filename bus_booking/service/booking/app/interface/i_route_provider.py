from abc import ABC, abstractmethod

from bus_booking.service.booking.app.dto.route_dto import RouteData


class IRouteProvider(ABC):
    @abstractmethod
    async def fetch(self) -> RouteData:
        """Fetch origin/destination lists. Raises RouteFetchError on failure."""
        pass
