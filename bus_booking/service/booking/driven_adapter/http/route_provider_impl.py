import httpx
from opentelemetry import trace

from bus_booking.platform.exception.exceptions import RouteFetchError
from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.app.dto.route_dto import RouteData
from bus_booking.service.booking.app.interface.i_route_provider import IRouteProvider
from bus_booking.service.booking.driven_adapter.http.api_client import unwrap


class RouteProviderImpl(IRouteProvider):
    """GET /buses/routes, either {sources, destinations} or a list of routes"""

    def __init__(self, *, client: httpx.AsyncClient) -> None:
        self.client = client
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def fetch(self) -> RouteData:
        with self.tracer.start_as_current_span('http.routes.fetch'):
            try:
                response = await self.client.get('/buses/routes')
                response.raise_for_status()
                return RouteData.from_payload(unwrap(response.json()))
            except (httpx.HTTPError, ValueError) as e:
                raise RouteFetchError(cause=e) from e
