#Purpose: Regional geofences used to bias address resolution.
#Defines lat/lon bounding boxes for the service area and helpers to test
#membership and to format a box the way each geocoding provider expects.
#Typical responsibilities:
#the primary geocoder restricts its search to SERVICE_AREA
#the secondary geocoder prefers results inside SERVICE_AREA, then COUNTRY
#No HTTP calls here.

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

#internal coordinate type :(lat,lon)
LatLon = Tuple[float, float]


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis aligned lat/lon box. Edges are inclusive.
    """

    name: str
    lat_min: float
    lon_min: float
    lat_max: float
    lon_max: float

    def contains(self, coordinate: LatLon) -> bool:
        lat, lon = coordinate
        return self.lat_min <= lat <= self.lat_max and self.lon_min <= lon <= self.lon_max

    def as_google_bounds(self) -> str:
        """'south,west|north,east' as accepted by the Google geocoding `bounds` parameter."""
        return f"{self.lat_min},{self.lon_min}|{self.lat_max},{self.lon_max}"

    def as_viewbox(self) -> str:
        """'west,south,east,north' as accepted by the Nominatim `viewbox` parameter."""
        return f"{self.lon_min},{self.lat_min},{self.lon_max},{self.lat_max}"


#South Moravia, where the fleet operates
SERVICE_AREA = BoundingBox("south-moravia", lat_min=48.7, lon_min=16.3, lat_max=49.3, lon_max=17.2)

#approximate Czech Republic
COUNTRY = BoundingBox("czech-republic", lat_min=48.5, lon_min=12.0, lat_max=51.1, lon_max=18.9)


def pick_preferred(
        coordinates: Sequence[LatLon],
        preference: Iterable[BoundingBox] = (SERVICE_AREA, COUNTRY),
) -> Optional[LatLon]:
    """
    Return the first coordinate inside the first box of `preference` that holds any,
    falling back to the first coordinate overall. None for an empty input.
    """
    if not coordinates:
        return None

    for box in preference:
        for coordinate in coordinates:
            if box.contains(coordinate):
                return coordinate

    return coordinates[0]
