"""Main bus tracker class."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from .config import FeedSettings
from .feed_client import FeedClient
from .models import Route, Stop, StopData, StopPredictions, VehicleLocation
from .poller import DEFAULT_POLL_INTERVAL, Poller
from .stop_index import StopIndex, extract_stop_id

logger = logging.getLogger(__name__)


class BusTracker:
    """
    Tracks live buses and stop arrivals for one agency.

    This class provides methods to:
    - Find stops by stop id, QR payload, tag or name
    - Get arrival predictions from every route serving a stop
    - Poll stops and vehicle positions until told to stop
    """

    def __init__(self, settings: FeedSettings = None, load_routes: bool = True, client: FeedClient = None):
        """
        Initialize the tracker.

        Args:
            settings: Feed endpoint and agency.
            load_routes: If True, fetch the route model on init. If False, call
                        load_routes() or set_routes() manually.
            client: Optional pre-built feed client.
        """
        self.client = client or FeedClient(settings)
        self.routes: List[Route] = []
        self.index = StopIndex([])
        self._pollers: List[Poller] = []

        if load_routes:
            try:
                self.load_routes()
            except Exception as e:
                logger.error(f"Failed to load route config: {e}")
                raise

    def load_routes(self) -> List[Route]:
        """Fetch the route model. Routes are static for the session."""
        self.set_routes(self.client.fetch_route_config())
        return self.routes

    def set_routes(self, routes: List[Route]) -> None:
        self.routes = list(routes)
        self.index = StopIndex(self.routes)

    def get_stop(self, stop_input: str) -> Stop:
        """
        Get a stop by stop id, QR payload, stop tag or name.

        Args:
            stop_input: e.g. "1234", "https://.../stop/1234", "tag-17" or "Library".

        Returns:
            Stop object.

        Raises:
            ValueError: If no stop matches.
        """
        # Id and tag lookups return the stop as its own route lists it
        stop = self.index.stop_with_id(extract_stop_id(stop_input))
        if stop is None:
            stop = self.index.stop_with_tag(stop_input)
        if stop is None:
            matches = self.index.search(stop_input) if stop_input.strip() else []
            if not matches:
                raise ValueError(f"No stop found matching '{stop_input}'")
            stop = matches[0].stop
        return stop

    def find_stops_by_name(self, name: str, route_tag: str = None) -> List[Stop]:
        """Find all stops whose title contains ``name``."""
        return [group.stop for group in self.index.search(name, route_tag)]

    def get_routes_for_stop(self, stop: Stop) -> List[Route]:
        """Every route stopping at the same physical location as ``stop``."""
        group = self.index.group_at(stop.lat, stop.lon)
        return list(group.routes) if group else []

    def get_predictions(self, stop: Stop) -> List[StopPredictions]:
        """
        Get arrivals at a stop from every route listing its tag.

        Args:
            stop: Stop object (from get_stop()).

        Returns:
            List of StopPredictions, grouped route by route in route order.
        """
        return self.client.fetch_all_predictions_for_stop(self.routes, stop.tag)

    def get_vehicles(self, route_tag: str = None) -> List[VehicleLocation]:
        """Get live vehicle positions, optionally for one route."""
        return self.client.fetch_vehicle_locations(route_tag)

    def get_stop_data(self, stop_input: str) -> StopData:
        """
        Get complete data for a stop.

        Args:
            stop_input: Stop id, QR payload, tag or name.

        Returns:
            StopData object with the stop, its routes and arrivals.
        """
        stop = self.get_stop(stop_input)
        predictions = self.get_predictions(stop)

        return StopData(
            stop=stop,
            routes=self.get_routes_for_stop(stop),
            predictions=predictions,
            last_updated=datetime.now(),
        )

    def watch_stop(
        self,
        stop: Stop,
        on_update: Callable[[List[StopPredictions]], None],
        interval: float = DEFAULT_POLL_INTERVAL,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Poller:
        """
        Poll predictions for a stop until the returned poller is stopped.

        A failed poll leaves the caller's last predictions in place.
        """
        poller = Poller(
            lambda: self.get_predictions(stop),
            on_update,
            interval=interval,
            on_error=on_error,
            name=f"stop-{stop.tag}",
        )
        return self._track(poller)

    def watch_vehicles(
        self,
        on_update: Callable[[List[VehicleLocation]], None],
        route_tag: str = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> Poller:
        """Poll vehicle positions until the returned poller is stopped."""
        poller = Poller(
            lambda: self.get_vehicles(route_tag),
            on_update,
            interval=interval,
            on_error=on_error,
            name=f"vehicles-{route_tag or 'all'}",
        )
        return self._track(poller)

    def _track(self, poller: Poller) -> Poller:
        self._pollers = [p for p in self._pollers if p.running]
        self._pollers.append(poller)
        return poller.start()

    def stop_all(self) -> None:
        """Stop every poller started by this tracker."""
        for poller in self._pollers:
            poller.stop()
        self._pollers.clear()

    def cleanup(self) -> None:
        """Stop polling and release network resources."""
        self.stop_all()
        self.client.close()
        logger.info("Cleaned up tracker resources")

    def __enter__(self) -> "BusTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
