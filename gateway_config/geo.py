"""H3 indexing of asserted locations."""
import math

import h3

from .const import H3_LATLON_RESOLUTION
from .errors import InvalidLocationError


def h3_index(lat: float, lon: float, resolution: int = H3_LATLON_RESOLUTION) -> str:
    """
    Convert a latitude/longitude pair to an H3 cell string.

    Raises InvalidLocationError for non-finite or out of range coordinates
    rather than letting h3 wrap them into an unrelated cell.
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidLocationError(f"Non-finite coordinates: ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise InvalidLocationError(f"Latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidLocationError(f"Longitude out of range: {lon}")

    return h3.latlng_to_cell(lat, lon, resolution)
