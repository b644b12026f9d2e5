# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Value formatter for presenting a metadata record.

Groups the flat record into camera, GPS, author and additional sections
of (label, value) rows and formats values for display. Nothing here is
needed to decode metadata.

Copyright 2025 DNAi inc.
"""

import math
import re
from typing import Any, Dict, List, Optional, Tuple

from metaimage.geolocation import gps_altitude, gps_coordinates

Row = Tuple[str, str]

MAP_URL = "https://www.google.com/maps?q={lat},{lon}"

CAMERA_KEYS = (
    'Make', 'Model', 'LensModel', 'ExposureTime', 'FNumber', 'ISO', 'ISOSpeedRatings',
    'FocalLength', 'Flash', 'WhiteBalance',
)
GPS_KEYS = (
    'GPSLatitude', 'GPSLongitude', 'GPSLatitudeRef', 'GPSLongitudeRef',
    'GPSAltitude', 'GPSAltitudeRef', 'GPSDateStamp', 'GPSTimeStamp',
)
AUTHOR_KEYS = ('Artist', 'Copyright', 'ImageDescription', 'Software')

# Fields shown in a dedicated section are left out of "additional"
EXCLUDED_KEYS = frozenset(CAMERA_KEYS + GPS_KEYS + AUTHOR_KEYS)


def format_number(value: Any) -> str:
    """Format a number without a trailing '.0' for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_bytes(num_bytes: int) -> str:
    """
    Format a byte count with a binary unit, e.g. 1536 -> '1.5 KB'.
    """
    if num_bytes <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB"]
    i = 0
    while num_bytes >= 1024 ** (i + 1) and i < len(sizes) - 1:
        i += 1
    value = round(num_bytes / (1024 ** i), 2)
    return f"{format_number(value)} {sizes[i]}"


def format_exposure_time(exposure: float) -> str:
    """Exposures under a second are shown as 1/N."""
    if 0 < exposure < 1:
        # Halves round up
        return f"1/{int(1 / exposure + 0.5)} sec"
    return f"{format_number(exposure)} sec"


def format_coordinate(decimal_degrees: float, ref: Optional[str]) -> str:
    return f"{decimal_degrees:.6f}° {ref or ''}".rstrip()


def map_url(latitude: float, longitude: float) -> str:
    return MAP_URL.format(lat=latitude, lon=longitude)


def humanize_key(key: str) -> str:
    """Insert a space before each capital: 'ExposureProgram' -> 'Exposure Program'."""
    return re.sub(r'([A-Z])', r' \1', key).strip()


def format_value(value: Any) -> str:
    if isinstance(value, (tuple, list)):
        return ", ".join(format_number(v) for v in value)
    return format_number(value)


def camera_rows(metadata: Dict[str, Any]) -> List[Row]:
    rows = []
    if metadata.get('Make') is not None:
        rows.append(("Camera Make", metadata['Make']))
    if metadata.get('Model') is not None:
        rows.append(("Camera Model", metadata['Model']))
    if metadata.get('LensModel') is not None:
        rows.append(("Lens Model", metadata['LensModel']))
    if metadata.get('ExposureTime') is not None:
        rows.append(("Exposure Time", format_exposure_time(metadata['ExposureTime'])))
    if metadata.get('FNumber') is not None:
        rows.append(("F-Number", f"f/{format_number(metadata['FNumber'])}"))

    iso = metadata.get('ISO', metadata.get('ISOSpeedRatings'))
    if iso is not None:
        rows.append(("ISO", format_number(iso)))

    if metadata.get('FocalLength') is not None:
        rows.append(("Focal Length", f"{format_number(metadata['FocalLength'])} mm"))
    if metadata.get('Flash') is not None:
        rows.append(("Flash", format_number(metadata['Flash'])))
    if metadata.get('WhiteBalance') is not None:
        rows.append(("White Balance", "Auto" if metadata['WhiteBalance'] == 0 else "Manual"))
    return rows


def gps_rows(metadata: Dict[str, Any]) -> List[Row]:
    rows = []
    coordinates = gps_coordinates(metadata)
    if coordinates is not None:
        lat, lon = coordinates
        rows.append(("Latitude", format_coordinate(lat, metadata.get('GPSLatitudeRef'))))
        rows.append(("Longitude", format_coordinate(lon, metadata.get('GPSLongitudeRef'))))
        rows.append(("Map Link", map_url(lat, lon)))

    altitude = gps_altitude(metadata)
    if altitude is not None:
        side = "Below" if math.copysign(1, altitude) < 0 else "Above"
        rows.append(("Altitude", f"{format_number(abs(altitude))} m {side} sea level"))

    time_stamp = metadata.get('GPSTimeStamp')
    if metadata.get('GPSDateStamp') and isinstance(time_stamp, (tuple, list)) and len(time_stamp) >= 3:
        clock = ":".join(format_number(v) for v in time_stamp[:3])
        rows.append(("GPS Date/Time", f"{metadata['GPSDateStamp']} {clock}"))
    return rows


def author_rows(metadata: Dict[str, Any]) -> List[Row]:
    labels = (
        ('Artist', "Artist/Author"),
        ('Copyright', "Copyright"),
        ('ImageDescription', "Description"),
        ('Software', "Software"),
    )
    return [(label, metadata[key]) for key, label in labels if metadata.get(key) is not None]


def additional_rows(metadata: Dict[str, Any]) -> List[Row]:
    return [
        (humanize_key(key), format_value(value))
        for key, value in metadata.items()
        if key not in EXCLUDED_KEYS and value is not None
    ]


def group_metadata(metadata: Dict[str, Any]) -> Dict[str, List[Row]]:
    """
    Group a metadata record into display sections.

    Args:
        metadata: Flat record produced by the EXIF parser

    Returns:
        Ordered dict of section name ('camera', 'gps', 'author',
        'additional') to (label, value) rows. Empty sections are kept.
    """
    return {
        'camera': camera_rows(metadata),
        'gps': gps_rows(metadata),
        'author': author_rows(metadata),
        'additional': additional_rows(metadata),
    }
