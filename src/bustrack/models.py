"""Data models for the bus feed."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from datetime import datetime


@dataclass(frozen=True)
class Stop:
    """Represents a stop as listed on one route."""
    tag: str  # Feed identifier, unique within the route
    title: str
    lat: float
    lon: float
    stop_id: str  # Rider-facing number, printed on signs and QR codes
    short_title: Optional[str] = None


@dataclass(frozen=True)
class Direction:
    """One travel direction of a route."""
    tag: str
    title: str
    name: str
    use_for_ui: bool
    stops: Tuple[str, ...] = ()  # Stop tags in traversal order


@dataclass(frozen=True)
class PathPoint:
    """A single point of a route polyline."""
    lat: float
    lon: float


@dataclass(frozen=True)
class Route:
    """Represents a bus route with its stops, directions and drawable paths."""
    tag: str
    title: str
    color: str  # Hex without '#'
    opposite_color: str
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    stops: Tuple[Stop, ...] = ()
    directions: Tuple[Direction, ...] = ()
    paths: Tuple[Tuple[PathPoint, ...], ...] = ()

    def has_stop(self, stop_tag: str) -> bool:
        return any(stop.tag == stop_tag for stop in self.stops)

    def get_stop(self, stop_tag: str) -> Optional[Stop]:
        for stop in self.stops:
            if stop.tag == stop_tag:
                return stop
        return None


@dataclass(frozen=True)
class VehicleLocation:
    """Represents a live vehicle position."""
    id: str
    route_tag: str
    dir_tag: str
    lat: float
    lon: float
    heading: float  # Degrees
    speed_km_hr: float
    secs_since_report: int


@dataclass(frozen=True)
class Prediction:
    """A single upcoming arrival estimate."""
    epoch_time: int  # Unix timestamp in milliseconds
    seconds: int
    minutes: int
    is_departure: bool
    affected_by_layover: bool
    dir_tag: str
    vehicle: str
    block: str


@dataclass(frozen=True)
class PredictionDirection:
    """Predictions for one direction of travel at a stop."""
    title: str
    predictions: Tuple[Prediction, ...] = ()


@dataclass(frozen=True)
class StopPredictions:
    """Predictions for one stop on one route."""
    stop_tag: str
    stop_title: str
    route_tag: str
    route_title: str
    directions: Tuple[PredictionDirection, ...] = ()


@dataclass
class StopGroup:
    """One physical stop and every route that serves it.

    Built and extended by StopIndex, which owns the ``routes`` list.
    """
    stop: Stop  # First stop seen at this location
    routes: List[Route] = field(default_factory=list)

    @property
    def route_tags(self) -> List[str]:
        return [route.tag for route in self.routes]


@dataclass
class StopData:
    """Complete data for a stop with its routes and arrivals."""
    stop: Stop
    routes: List[Route]
    predictions: List[StopPredictions]
    last_updated: datetime
