from typing import Any, Iterable, Mapping

import attrs


def _clean(values: Iterable[Any]) -> tuple[str, ...]:
    return tuple(sorted({str(v).strip() for v in values if v is not None and str(v).strip()}))


@attrs.define(frozen=True)
class RouteData:
    """Origin and destination lists for the search form, de-duplicated and sorted"""

    sources: tuple[str, ...] = attrs.field(default=(), converter=_clean)
    destinations: tuple[str, ...] = attrs.field(default=(), converter=_clean)

    @classmethod
    def from_routes(cls, routes: Iterable[Mapping[str, Any]]) -> 'RouteData':
        """Build from a route list, e.g. [{'source': 'Pune', 'destination': 'Goa'}]"""
        routes = [r for r in routes if isinstance(r, Mapping)]
        return cls(
            sources=[r.get('source') for r in routes],
            destinations=[r.get('destination') for r in routes],
        )

    @classmethod
    def from_payload(cls, payload: Any) -> 'RouteData':
        if isinstance(payload, Mapping) and ('sources' in payload or 'destinations' in payload):
            return cls(
                sources=payload.get('sources') or (),
                destinations=payload.get('destinations') or (),
            )
        if isinstance(payload, list):
            return cls.from_routes(payload)
        raise ValueError(f'Unrecognised route payload: {type(payload).__name__}')
