"""
Purpose: Turn-by-turn deep links for the assigned driver.
What it does:
Builds a navigation URL from resolved stop coordinates for the driver's
preferred app. Google Maps omits the origin so the phone uses its own
location; Waze starts at the pickup.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Tuple
from urllib.parse import urlencode

LatLon = Tuple[float, float]


class NavigationApp(str, Enum):
    GOOGLE = "google"
    WAZE = "waze"
    MAPY = "mapy"


_HOME_PAGES = {
    NavigationApp.GOOGLE: "https://maps.google.com",
    NavigationApp.WAZE: "https://waze.com",
    NavigationApp.MAPY: "https://mapy.cz",
}


def _fmt(coordinate: LatLon) -> str:
    return f"{coordinate[0]},{coordinate[1]}"


def navigation_url(stops: List[LatLon], app: NavigationApp = NavigationApp.GOOGLE) -> str:
    app = NavigationApp(app)
    if not stops:
        return _HOME_PAGES[app]

    destination = stops[-1]

    if app == NavigationApp.WAZE:
        url = f"https://waze.com/ul?ll={_fmt(destination)}&from={_fmt(stops[0])}&navigate=yes"
        via = stops[1:-1]
        if via:
            url += "&via=" + "|".join(_fmt(c) for c in via)
        return url

    if app == NavigationApp.MAPY:
        url = f"https://mapy.cz/zakladni?x={destination[1]}&y={destination[0]}&z=15"
        # route points are lon%2Clat, numbered from 1
        for index, (lat, lon) in enumerate(stops[:-1], start=1):
            url += f"&rl{index}={lon}%2C{lat}"
        return url

    params = {"api": "1", "destination": _fmt(destination)}
    waypoints = stops[:-1]
    if waypoints:
        params["waypoints"] = "|".join(_fmt(c) for c in waypoints)
    params["travelmode"] = "driving"
    return "https://www.google.com/maps/dir/?" + urlencode(params)
