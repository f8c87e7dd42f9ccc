"""BusTrack - Real-time bus arrivals and vehicle positions from a NextBus-style XML feed."""

__version__ = "0.1.0"

from .config import FeedSettings
from .errors import (
    TransitFeedError,
    HttpError,
    ContentTypeError,
    PayloadTooLargeError,
    ParseError,
    FeedConnectionError,
)
from .models import (
    Route,
    Stop,
    Direction,
    PathPoint,
    VehicleLocation,
    Prediction,
    PredictionDirection,
    StopPredictions,
    StopGroup,
    StopData,
)
from .feed_client import FeedClient, PredictionsResult, routes_serving_stop
from .stop_index import StopIndex, location_key, extract_stop_id
from .poller import Poller
from .tracker import BusTracker

__all__ = [
    "BusTracker",
    "FeedClient",
    "FeedSettings",
    "StopIndex",
    "Poller",
    "PredictionsResult",
    "routes_serving_stop",
    "location_key",
    "extract_stop_id",
    "Route",
    "Stop",
    "Direction",
    "PathPoint",
    "VehicleLocation",
    "Prediction",
    "PredictionDirection",
    "StopPredictions",
    "StopGroup",
    "StopData",
    "TransitFeedError",
    "HttpError",
    "ContentTypeError",
    "PayloadTooLargeError",
    "ParseError",
    "FeedConnectionError",
]
