"""
Geo primitives shared by grouping and routing.
"""
import math
from typing import Iterable, List, Optional, Tuple

from portfolio_engine.schemas.property import Property

EARTH_RADIUS_MILES = 3959.0


def distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in miles between two coordinates (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def has_coordinates(prop: Property) -> bool:
    """True when both coordinates are present and finite."""
    return (
        prop.latitude is not None
        and prop.longitude is not None
        and math.isfinite(prop.latitude)
        and math.isfinite(prop.longitude)
    )


def split_by_coordinates(properties: Iterable[Property]) -> Tuple[List[Property], List[Property]]:
    """Partition properties into (locatable, missing coordinates), keeping order."""
    located: List[Property] = []
    missing: List[Property] = []
    for prop in properties:
        (located if has_coordinates(prop) else missing).append(prop)
    return located, missing


def centroid(properties: List[Property]) -> Optional[Tuple[float, float]]:
    """Mean latitude/longitude of the locatable properties, or None."""
    located = [p for p in properties if has_coordinates(p)]
    if not located:
        return None
    lat = sum(p.latitude for p in located) / len(located)
    lng = sum(p.longitude for p in located) / len(located)
    return lat, lng
