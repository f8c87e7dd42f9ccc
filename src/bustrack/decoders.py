"""Decoders that turn parsed feed documents into model records.

Decoding never fails on a bad field: every attribute goes through the
sanitize helpers and degrades to a default.
"""

import logging
from typing import List, Tuple

from .models import (
    Direction,
    PathPoint,
    Prediction,
    PredictionDirection,
    Route,
    Stop,
    StopPredictions,
    VehicleLocation,
)
from .sanitize import safe_bool, safe_float, safe_int, sanitize_color, sanitize_text
from .transport import ParsedDocument

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_COLOR = "000000"
DEFAULT_OPPOSITE_COLOR = "ffffff"


def _decode_stop(stop_el) -> Stop:
    short_title = stop_el.get("shortTitle")
    return Stop(
        tag=sanitize_text(stop_el.get("tag")),
        title=sanitize_text(stop_el.get("title")),
        short_title=sanitize_text(short_title) if short_title else None,
        lat=safe_float(stop_el.get("lat")),
        lon=safe_float(stop_el.get("lon")),
        stop_id=sanitize_text(stop_el.get("stopId")),
    )


def _decode_direction(dir_el) -> Direction:
    return Direction(
        tag=sanitize_text(dir_el.get("tag")),
        title=sanitize_text(dir_el.get("title")),
        name=sanitize_text(dir_el.get("name")),
        use_for_ui=safe_bool(dir_el.get("useForUI")),
        stops=tuple(sanitize_text(stop_el.get("tag")) for stop_el in dir_el.findall("stop")),
    )


def _decode_path(path_el) -> Tuple[PathPoint, ...]:
    return tuple(
        PathPoint(lat=safe_float(point_el.get("lat")), lon=safe_float(point_el.get("lon")))
        for point_el in path_el.findall("point")
    )


def decode_route_config(root: ParsedDocument) -> List[Route]:
    """
    Decode a routeConfig response.

    Only the root's direct <route> children are read. Within a route, only
    direct <stop> children are route stops; the <stop> references nested in
    <direction> elements become that direction's ordered stop tags.

    Args:
        root: Parsed routeConfig document.

    Returns:
        List of Route objects in document order.
    """
    routes: List[Route] = []

    for route_el in root.findall("route"):
        paths = []
        for path_el in route_el.findall("path"):
            points = _decode_path(path_el)
            # Empty paths have nothing to draw
            if points:
                paths.append(points)

        tag = sanitize_text(route_el.get("tag"))
        if not tag:
            logger.debug("Route element without a usable tag")

        routes.append(
            Route(
                tag=tag,
                title=sanitize_text(route_el.get("title")),
                color=sanitize_color(route_el.get("color"), DEFAULT_ROUTE_COLOR),
                opposite_color=sanitize_color(route_el.get("oppositeColor"), DEFAULT_OPPOSITE_COLOR),
                lat_min=safe_float(route_el.get("latMin")),
                lat_max=safe_float(route_el.get("latMax")),
                lon_min=safe_float(route_el.get("lonMin")),
                lon_max=safe_float(route_el.get("lonMax")),
                stops=tuple(_decode_stop(stop_el) for stop_el in route_el.findall("stop")),
                directions=tuple(_decode_direction(dir_el) for dir_el in route_el.findall("direction")),
                paths=tuple(paths),
            )
        )

    logger.debug(f"Decoded {len(routes)} routes")
    return routes


def decode_vehicle_locations(root: ParsedDocument) -> List[VehicleLocation]:
    """Decode a vehicleLocations response into VehicleLocation objects."""
    return [
        VehicleLocation(
            id=sanitize_text(vehicle_el.get("id")),
            route_tag=sanitize_text(vehicle_el.get("routeTag")),
            dir_tag=sanitize_text(vehicle_el.get("dirTag")),
            lat=safe_float(vehicle_el.get("lat")),
            lon=safe_float(vehicle_el.get("lon")),
            heading=safe_float(vehicle_el.get("heading")),
            speed_km_hr=safe_float(vehicle_el.get("speedKmHr")),
            secs_since_report=safe_int(vehicle_el.get("secsSinceReport")),
        )
        for vehicle_el in root.iter("vehicle")
    ]


def _decode_prediction(pred_el) -> Prediction:
    return Prediction(
        epoch_time=safe_int(pred_el.get("epochTime")),
        seconds=safe_int(pred_el.get("seconds")),
        minutes=safe_int(pred_el.get("minutes")),
        is_departure=safe_bool(pred_el.get("isDeparture")),
        affected_by_layover=safe_bool(pred_el.get("affectedByLayover")),
        dir_tag=sanitize_text(pred_el.get("dirTag")),
        vehicle=sanitize_text(pred_el.get("vehicle")),
        block=sanitize_text(pred_el.get("block")),
    )


def decode_predictions(root: ParsedDocument) -> List[StopPredictions]:
    """
    Decode a predictions or predictionsForMultiStops response.

    Directions without predictions are dropped, and so is any <predictions>
    wrapper left without directions. Every returned StopPredictions has at
    least one direction holding at least one prediction.

    Args:
        root: Parsed predictions document.

    Returns:
        List of StopPredictions in document order.
    """
    results: List[StopPredictions] = []

    for wrapper_el in root.iter("predictions"):
        directions: List[PredictionDirection] = []

        for dir_el in wrapper_el.findall("direction"):
            predictions = tuple(_decode_prediction(pred_el) for pred_el in dir_el.findall("prediction"))
            if predictions:
                directions.append(
                    PredictionDirection(
                        title=sanitize_text(dir_el.get("title")),
                        predictions=predictions,
                    )
                )

        if not directions:
            continue

        results.append(
            StopPredictions(
                stop_tag=sanitize_text(wrapper_el.get("stopTag")),
                stop_title=sanitize_text(wrapper_el.get("stopTitle")),
                route_tag=sanitize_text(wrapper_el.get("routeTag")),
                route_title=sanitize_text(wrapper_el.get("routeTitle")),
                directions=tuple(directions),
            )
        )

    return results
