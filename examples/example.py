"""Example usage of BusTracker."""

import logging
import sys
import time
from pathlib import Path

# Add src to path so we can import bustrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bustrack import BusTracker, FeedSettings, TransitFeedError

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def print_predictions(predictions):
    if not predictions:
        print("  No arrivals available")
        return
    for stop_predictions in predictions:
        for direction in stop_predictions.directions:
            minutes = ", ".join(str(p.minutes) for p in direction.predictions)
            print(f"  {stop_predictions.route_title} → {direction.title}: {minutes} min")


def print_stop_data(tracker: BusTracker, stop_input: str):
    """
    Fetch and display arrivals for a stop.

    Args:
        tracker: Loaded tracker.
        stop_input: Stop name, stop id or QR payload (e.g., "Library" or "1234")
    """
    print(f"\n{'='*70}")
    print(f"Fetching data for: {stop_input}")
    print(f"{'='*70}\n")

    stop_data = tracker.get_stop_data(stop_input)

    print(f"Stop: {stop_data.stop.short_title or stop_data.stop.title}")
    print(f"Stop ID: {stop_data.stop.stop_id}")
    print(f"Routes serving this stop: {', '.join(r.title for r in stop_data.routes)}")
    print(f"Last updated: {stop_data.last_updated.strftime('%H:%M:%S')}\n")
    print("ARRIVALS:")
    print("-" * 70)
    print_predictions(stop_data.predictions)


def watch(tracker: BusTracker, stop_input: str, seconds: int = 90):
    """Poll a stop every 30 seconds for a while."""
    stop = tracker.get_stop(stop_input)
    with tracker.watch_stop(stop, on_update=print_predictions):
        time.sleep(seconds)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: example.py <stop name|stop id> [--watch]")
        sys.exit(1)

    watch_mode = "--watch" in sys.argv
    stop_name = " ".join(arg for arg in sys.argv[1:] if arg != "--watch")

    try:
        with BusTracker(FeedSettings.from_env()) as tracker:
            if watch_mode:
                watch(tracker, stop_name)
            else:
                print_stop_data(tracker, stop_name)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except TransitFeedError as e:
        logger.error(f"Feed request failed: {e}")
        sys.exit(1)
