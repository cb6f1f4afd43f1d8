"""Great-circle distances between team stadiums."""

import math
from itertools import combinations

from sixsched.models import Team, pair_key

EARTH_RADIUS_KM = 6371.0

DistanceTable = dict[frozenset[str], float]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two (lat, lon) points in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lon2 - lon1)
    a = (math.sin(d_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def team_distance(a: Team, b: Team) -> float:
    return haversine_km(a.stadium.latitude, a.stadium.longitude,
                        b.stadium.latitude, b.stadium.longitude)


def build_distance_table(teams: list[Team]) -> DistanceTable:
    """Distance for every pair of teams, keyed by unordered id pair.

    Read-only once built; safe to share between runs.
    """
    return {
        pair_key(a.id, b.id): team_distance(a, b)
        for a, b in combinations(teams, 2)
    }


def distance_between(table: DistanceTable, id_a: str, id_b: str) -> float:
    if id_a == id_b:
        return 0.0
    return table.get(pair_key(id_a, id_b), 0.0)
