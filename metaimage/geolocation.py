# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Geolocation module - GPS coordinate conversion.

Converts the sexagesimal (degrees, minutes, seconds) GPS values stored
in EXIF into signed decimal degrees.
"""

from typing import Any, Dict, Optional, Sequence, Tuple

NEGATIVE_HEMISPHERES = ('S', 'W')


def to_decimal_degrees(
    degrees: float,
    minutes: float,
    seconds: float,
    hemisphere: Optional[str] = None
) -> float:
    """
    Convert degrees/minutes/seconds to signed decimal degrees.

    Inputs are not range checked.

    Args:
        degrees: Whole or fractional degrees
        minutes: Minutes of arc
        seconds: Seconds of arc
        hemisphere: 'N', 'S', 'E' or 'W'; 'S' and 'W' negate the result

    Returns:
        Decimal degrees
    """
    dd = degrees + minutes / 60 + seconds / 3600
    if hemisphere in NEGATIVE_HEMISPHERES:
        dd = -dd
    return dd


def _triplet(value: Any) -> Optional[Sequence[float]]:
    if isinstance(value, (tuple, list)) and len(value) == 3:
        return value
    return None


def gps_coordinates(metadata: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """
    Get (latitude, longitude) in decimal degrees from a metadata record.

    Returns:
        Tuple of (latitude, longitude), or None unless both GPSLatitude
        and GPSLongitude are present as full triplets
    """
    latitude = _triplet(metadata.get('GPSLatitude'))
    longitude = _triplet(metadata.get('GPSLongitude'))
    if latitude is None or longitude is None:
        return None

    return (
        to_decimal_degrees(*latitude, metadata.get('GPSLatitudeRef')),
        to_decimal_degrees(*longitude, metadata.get('GPSLongitudeRef')),
    )


def gps_altitude(metadata: Dict[str, Any]) -> Optional[float]:
    """
    Get the signed altitude in meters (negative below sea level).
    """
    altitude = metadata.get('GPSAltitude')
    if altitude is None:
        return None
    if metadata.get('GPSAltitudeRef') == 1:
        return -altitude
    return altitude
