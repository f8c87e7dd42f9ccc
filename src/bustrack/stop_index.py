"""Index over the route model: physical stops, search and QR lookup."""

import logging
import re
from typing import Dict, List, Optional

from .models import Route, Stop, StopGroup
from .sanitize import sanitize_text

logger = logging.getLogger(__name__)

_STOP_PARAM = re.compile(r"stop=([^&#]+)")
_URL_TAIL = re.compile(r"[?#]")


def location_key(lat: float, lon: float) -> str:
    """
    Key for "the same physical stop".

    Rounded to 4 decimal places (~11 m), so stops listed by different routes
    at the same curb collapse into one.
    """
    return f"{lat:.4f},{lon:.4f}"


def extract_stop_id(payload: str) -> str:
    """
    Pull a stop id out of a scanned QR code.

    Handles "...?stop=123&x=1", ".../stop/123#top" and a bare "123".
    """
    text = sanitize_text(payload)
    if "stop=" in text:
        match = _STOP_PARAM.search(text)
        if match:
            return match.group(1)
    elif "/stop/" in text:
        tail = text.split("/stop/", 1)[1]
        stop_id = _URL_TAIL.split(tail, 1)[0]
        if stop_id:
            return stop_id
    return text


class StopIndex:
    """Indexes stops across routes by physical location."""

    def __init__(self, routes: List[Route]):
        """
        Build the index.

        Args:
            routes: Route model, in feed order.
        """
        self.routes = list(routes)
        self.routes_by_tag: Dict[str, Route] = {route.tag: route for route in self.routes}
        self._groups = self._group_stops(self.routes)
        logger.debug(f"Indexed {len(self._groups)} physical stops across {len(self.routes)} routes")

    @staticmethod
    def _group_stops(routes: List[Route]) -> List[StopGroup]:
        groups: Dict[str, StopGroup] = {}

        for route in routes:
            for stop in route.stops:
                key = location_key(stop.lat, stop.lon)
                group = groups.get(key)
                if group is None:
                    groups[key] = StopGroup(stop=stop, routes=[route])
                elif route.tag not in group.route_tags:
                    group.routes.append(route)

        return list(groups.values())

    def get_route(self, route_tag: str) -> Route:
        """Get route by tag."""
        if route_tag not in self.routes_by_tag:
            raise ValueError(f"Route {route_tag} not found")
        return self.routes_by_tag[route_tag]

    def unique_stops(self, route_tag: str = None) -> List[StopGroup]:
        """
        Physical stops, each with the routes serving it.

        Args:
            route_tag: If given, only stops on this route (grouped within it).

        Returns:
            List of StopGroup objects in first-seen order.
        """
        if route_tag is None:
            return list(self._groups)
        return self._group_stops([self.get_route(route_tag)])

    def search(self, query: str, route_tag: str = None) -> List[StopGroup]:
        """
        Find stops by title, short title (case-insensitive) or stop id.

        A blank query matches everything. Results are sorted by title.
        """
        query = query.strip()
        query_lower = query.lower()
        results = []

        for group in self.unique_stops(route_tag):
            stop = group.stop
            if (
                not query
                or query_lower in stop.title.lower()
                or (stop.short_title and query_lower in stop.short_title.lower())
                or query in stop.stop_id
            ):
                results.append(group)

        return sorted(results, key=lambda group: group.stop.title.lower())

    def find_by_stop_id(self, stop_id: str) -> Optional[StopGroup]:
        """Find the physical stop carrying a rider-facing stop id."""
        stop = self.stop_with_id(stop_id)
        return self.group_at(stop.lat, stop.lon) if stop else None

    def find_by_tag(self, stop_tag: str) -> Optional[StopGroup]:
        """Find the physical stop of the first route listing ``stop_tag``."""
        stop = self.stop_with_tag(stop_tag)
        return self.group_at(stop.lat, stop.lon) if stop else None

    def stop_with_id(self, stop_id: str) -> Optional[Stop]:
        """The stop (as listed by its route) carrying a rider-facing stop id."""
        stop_id = sanitize_text(stop_id)
        if not stop_id:
            return None
        for route in self.routes:
            for stop in route.stops:
                if stop.stop_id == stop_id:
                    return stop
        return None

    def stop_with_tag(self, stop_tag: str) -> Optional[Stop]:
        """The first route's stop listed under ``stop_tag``."""
        for route in self.routes:
            stop = route.get_stop(stop_tag)
            if stop is not None:
                return stop
        return None

    def find_by_qr(self, payload: str) -> Optional[StopGroup]:
        """Resolve a scanned QR payload to a physical stop."""
        return self.find_by_stop_id(extract_stop_id(payload))

    def group_at(self, lat: float, lon: float) -> Optional[StopGroup]:
        """The physical stop at a location, if any route stops there."""
        key = location_key(lat, lon)
        for group in self._groups:
            if location_key(group.stop.lat, group.stop.lon) == key:
                return group
        return None
