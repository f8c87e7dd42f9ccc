"""Bus feed client: route config, vehicle locations and predictions."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .config import FeedSettings
from .decoders import decode_predictions, decode_route_config, decode_vehicle_locations
from .errors import TransitFeedError
from .models import Route, StopPredictions, VehicleLocation
from .transport import FeedTransport

logger = logging.getLogger(__name__)


@dataclass
class PredictionsResult:
    """Predictions gathered route by route, with the routes that failed."""
    predictions: List[StopPredictions] = field(default_factory=list)
    errors: Dict[str, TransitFeedError] = field(default_factory=dict)  # route_tag -> error

    @property
    def ok(self) -> bool:
        return not self.errors


def routes_serving_stop(routes: List[Route], stop_tag: str) -> List[Route]:
    """Routes whose stop list contains ``stop_tag``, in their original order."""
    return [route for route in routes if route.has_stop(stop_tag)]


class FeedClient:
    """Fetches and decodes the bus XML feed."""

    def __init__(self, settings: FeedSettings = None, transport: FeedTransport = None):
        """
        Initialize the feed client.

        Args:
            settings: Feed endpoint and agency; defaults to the public feed.
            transport: Optional transport, built from ``settings`` when omitted.
        """
        self.settings = settings or FeedSettings()
        self.transport = transport or FeedTransport(self.settings)

    def _fetch(self, command: str, **params: str):
        query = {"command": command, "a": self.settings.agency}
        query.update(params)
        return self.transport.fetch_document(self.settings.base_url, params=query)

    def fetch_route_config(self) -> List[Route]:
        """
        Get every route of the agency with its stops, directions and paths.

        Returns:
            List of Route objects in feed order.
        """
        routes = decode_route_config(self._fetch("routeConfig"))
        logger.info(f"Loaded {len(routes)} routes for agency {self.settings.agency}")
        return routes

    def fetch_vehicle_locations(self, route_tag: str = None) -> List[VehicleLocation]:
        """
        Get live vehicle positions.

        Args:
            route_tag: Optional route to restrict to. If None, returns all vehicles.

        Returns:
            List of VehicleLocation objects.
        """
        params = {"t": "0"}
        if route_tag is not None:
            params["r"] = route_tag
        return decode_vehicle_locations(self._fetch("vehicleLocations", **params))

    def fetch_predictions(self, stop_tag: str, route_tag: str = None) -> List[StopPredictions]:
        """
        Get arrival predictions for a stop.

        Args:
            stop_tag: Stop tag within the route.
            route_tag: Optional route. Without one, asks for every route at the stop.

        Returns:
            List of StopPredictions, each with at least one prediction.
        """
        if route_tag is not None:
            doc = self._fetch("predictions", r=route_tag, s=stop_tag)
        else:
            doc = self._fetch("predictionsForMultiStops", stops=stop_tag)
        return decode_predictions(doc)

    def fetch_all_predictions_for_stop(self, routes: List[Route], stop_tag: str) -> List[StopPredictions]:
        """
        Get predictions for a stop from every route that serves it.

        Requests go out one at a time, in the order of ``routes``. The first
        failure propagates and the remaining routes are not queried.

        Args:
            routes: Route model from fetch_route_config().
            stop_tag: Stop tag to look up.

        Returns:
            Concatenated StopPredictions; empty if no route serves the stop.
        """
        all_predictions: List[StopPredictions] = []

        for route in routes_serving_stop(routes, stop_tag):
            all_predictions.extend(self.fetch_predictions(stop_tag, route.tag))

        return all_predictions

    def collect_predictions_for_stop(self, routes: List[Route], stop_tag: str) -> PredictionsResult:
        """
        Like fetch_all_predictions_for_stop(), but keeps going after a failure.

        Returns:
            PredictionsResult with the predictions that arrived and the error
            for each route that failed.
        """
        result = PredictionsResult()

        for route in routes_serving_stop(routes, stop_tag):
            try:
                result.predictions.extend(self.fetch_predictions(stop_tag, route.tag))
            except TransitFeedError as e:
                logger.warning(f"Failed to fetch predictions for route {route.tag}: {e}")
                result.errors[route.tag] = e

        return result

    def close(self) -> None:
        self.transport.close()
