"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from dependency_injector import containers, providers

from bus_booking.platform.config.core_setting import Settings
from bus_booking.service.booking.app.command.booking_session_controller import (
    BookingSessionController,
)
from bus_booking.service.booking.app.query.route_cache import RouteCache
from bus_booking.service.booking.app.query.seat_map_loader import SeatMapLoader
from bus_booking.service.booking.domain.layout_planner import LayoutPlanner
from bus_booking.service.booking.domain.value_object.row_layout_policy import RowLayoutPolicy
from bus_booking.service.booking.driven_adapter.http.api_client import create_api_client
from bus_booking.service.booking.driven_adapter.http.booking_submitter_impl import (
    BookingSubmitterImpl,
)
from bus_booking.service.booking.driven_adapter.http.route_provider_impl import RouteProviderImpl
from bus_booking.service.booking.driven_adapter.http.seat_detail_provider_impl import (
    SeatDetailProviderImpl,
)
from bus_booking.service.booking.driven_adapter.mock.mock_seat_provider_impl import (
    MockSeatProviderImpl,
)
from bus_booking.service.booking.driven_adapter.state.in_memory_session_store import (
    InMemorySessionStore,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # HTTP client shared by every ticketing API adapter
    api_client = providers.Singleton(create_api_client, config=config_service)

    # Driven adapters (stateless apart from the shared client)
    seat_detail_provider = providers.Singleton(SeatDetailProviderImpl, client=api_client)
    booking_submitter = providers.Singleton(BookingSubmitterImpl, client=api_client)
    route_provider = providers.Singleton(RouteProviderImpl, client=api_client)
    mock_seat_provider = providers.Singleton(
        MockSeatProviderImpl,
        seat_count=config_service.provided.MOCK_SEAT_COUNT,
        row_width=config_service.provided.SEAT_ROW_WIDTH,
    )
    session_store = providers.Singleton(InMemorySessionStore)

    # Layout
    row_layout_policy = providers.Singleton(
        RowLayoutPolicy.for_widths,
        regular_width=config_service.provided.SEAT_ROW_WIDTH,
        rear_width=config_service.provided.REAR_ROW_WIDTH,
        rear_row=config_service.provided.REAR_ROW,
    )
    layout_planner = providers.Singleton(LayoutPlanner, policy=row_layout_policy)

    # Route cache is the only state shared across sessions
    route_cache = providers.Singleton(
        RouteCache,
        provider=route_provider,
        ttl_seconds=config_service.provided.ROUTE_CACHE_TTL_SECONDS,
    )

    # Per-session objects
    seat_map_loader = providers.Factory(
        SeatMapLoader,
        provider=seat_detail_provider,
        planner=layout_planner,
        fallback_provider=mock_seat_provider,
        allow_fallback=config_service.provided.ALLOW_MOCK_SEATS,
        cache_ttl_seconds=config_service.provided.SEAT_DETAIL_CACHE_TTL_SECONDS,
        row_width=config_service.provided.SEAT_ROW_WIDTH,
    )
    booking_session_controller = providers.Factory(
        BookingSessionController,
        submitter=booking_submitter,
    )


container = Container()


def setup() -> None:
    container.config_service()


async def cleanup() -> None:
    await container.api_client().aclose()
    container.reset_singletons()
