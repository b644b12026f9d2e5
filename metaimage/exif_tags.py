# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag definitions

Maps 16-bit tag ids to canonical field names and the value types each
tag may use, per IFD namespace (main IFD, Exif sub-IFD, GPS IFD).
Tags that are not listed here are skipped by the walker and never
appear in a metadata record.

Tag ids follow EXIF 2.3. Only tags whose values can be
expressed with BYTE, ASCII, SHORT, LONG or RATIONAL are listed.

Copyright 2025 DNAi inc.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple

from metaimage.value_decoder import ExifTagType


class IFDNamespace(Enum):
    """Which catalog applies to an IFD"""
    MAIN = 'main'
    EXIF = 'exif'
    GPS = 'gps'


class TagDef(NamedTuple):
    name: str
    types: Tuple[int, ...]


_BYTE = (ExifTagType.BYTE,)
_ASCII = (ExifTagType.ASCII,)
_SHORT = (ExifTagType.SHORT,)
_LONG = (ExifTagType.LONG,)
_INT = (ExifTagType.SHORT, ExifTagType.LONG)
_RATIONAL = (ExifTagType.RATIONAL,)

# Sub-IFD pointers
EXIF_IFD_POINTER = 0x8769
GPS_IFD_POINTER = 0x8825

POINTER_TAGS: Dict[int, IFDNamespace] = {
    EXIF_IFD_POINTER: IFDNamespace.EXIF,
    GPS_IFD_POINTER: IFDNamespace.GPS,
}

# IFD1 thumbnail location
JPEG_INTERCHANGE_FORMAT = 0x0201
JPEG_INTERCHANGE_FORMAT_LENGTH = 0x0202

MAIN_IFD_TAGS: Dict[int, TagDef] = {
    0x00FE: TagDef("SubfileType", _LONG),
    0x0100: TagDef("ImageWidth", _INT),
    0x0101: TagDef("ImageLength", _INT),
    0x0102: TagDef("BitsPerSample", _SHORT),
    0x0103: TagDef("Compression", _SHORT),
    0x0106: TagDef("PhotometricInterpretation", _SHORT),
    0x010D: TagDef("DocumentName", _ASCII),
    0x010E: TagDef("ImageDescription", _ASCII),
    0x010F: TagDef("Make", _ASCII),
    0x0110: TagDef("Model", _ASCII),
    0x0112: TagDef("Orientation", _SHORT),
    0x0115: TagDef("SamplesPerPixel", _SHORT),
    0x0116: TagDef("RowsPerStrip", _INT),
    0x011A: TagDef("XResolution", _RATIONAL),
    0x011B: TagDef("YResolution", _RATIONAL),
    0x011C: TagDef("PlanarConfiguration", _SHORT),
    0x011D: TagDef("PageName", _ASCII),
    0x0128: TagDef("ResolutionUnit", _SHORT),
    0x0131: TagDef("Software", _ASCII),
    0x0132: TagDef("DateTime", _ASCII),
    0x013B: TagDef("Artist", _ASCII),
    0x013C: TagDef("HostComputer", _ASCII),
    0x0213: TagDef("YCbCrPositioning", _SHORT),
    0x8298: TagDef("Copyright", _ASCII),
}

EXIF_IFD_TAGS: Dict[int, TagDef] = {
    0x829A: TagDef("ExposureTime", _RATIONAL),
    0x829D: TagDef("FNumber", _RATIONAL),
    0x8822: TagDef("ExposureProgram", _SHORT),
    0x8824: TagDef("SpectralSensitivity", _ASCII),
    0x8827: TagDef("ISOSpeedRatings", _SHORT),
    0x8830: TagDef("SensitivityType", _SHORT),
    0x8832: TagDef("RecommendedExposureIndex", _LONG),
    0x9003: TagDef("DateTimeOriginal", _ASCII),
    0x9004: TagDef("DateTimeDigitized", _ASCII),
    0x9010: TagDef("OffsetTime", _ASCII),
    0x9011: TagDef("OffsetTimeOriginal", _ASCII),
    0x9012: TagDef("OffsetTimeDigitized", _ASCII),
    0x9102: TagDef("CompressedBitsPerPixel", _RATIONAL),
    0x9202: TagDef("ApertureValue", _RATIONAL),
    0x9205: TagDef("MaxApertureValue", _RATIONAL),
    0x9206: TagDef("SubjectDistance", _RATIONAL),
    0x9207: TagDef("MeteringMode", _SHORT),
    0x9208: TagDef("LightSource", _SHORT),
    0x9209: TagDef("Flash", _SHORT),
    0x920A: TagDef("FocalLength", _RATIONAL),
    0x9290: TagDef("SubsecTime", _ASCII),
    0x9291: TagDef("SubsecTimeOriginal", _ASCII),
    0x9292: TagDef("SubsecTimeDigitized", _ASCII),
    0xA001: TagDef("ColorSpace", _SHORT),
    0xA002: TagDef("PixelXDimension", _INT),
    0xA003: TagDef("PixelYDimension", _INT),
    0xA004: TagDef("RelatedSoundFile", _ASCII),
    0xA20B: TagDef("FlashEnergy", _RATIONAL),
    0xA20E: TagDef("FocalPlaneXResolution", _RATIONAL),
    0xA20F: TagDef("FocalPlaneYResolution", _RATIONAL),
    0xA210: TagDef("FocalPlaneResolutionUnit", _SHORT),
    0xA215: TagDef("ExposureIndex", _RATIONAL),
    0xA217: TagDef("SensingMethod", _SHORT),
    0xA401: TagDef("CustomRendered", _SHORT),
    0xA402: TagDef("ExposureMode", _SHORT),
    0xA403: TagDef("WhiteBalance", _SHORT),
    0xA404: TagDef("DigitalZoomRatio", _RATIONAL),
    0xA405: TagDef("FocalLengthIn35mmFilm", _SHORT),
    0xA406: TagDef("SceneCaptureType", _SHORT),
    0xA407: TagDef("GainControl", _SHORT),
    0xA408: TagDef("Contrast", _SHORT),
    0xA409: TagDef("Saturation", _SHORT),
    0xA40A: TagDef("Sharpness", _SHORT),
    0xA40C: TagDef("SubjectDistanceRange", _SHORT),
    0xA420: TagDef("ImageUniqueID", _ASCII),
    0xA430: TagDef("CameraOwnerName", _ASCII),
    0xA431: TagDef("BodySerialNumber", _ASCII),
    0xA433: TagDef("LensMake", _ASCII),
    0xA434: TagDef("LensModel", _ASCII),
    0xA435: TagDef("LensSerialNumber", _ASCII),
}

GPS_IFD_TAGS: Dict[int, TagDef] = {
    0x0001: TagDef("GPSLatitudeRef", _ASCII),
    0x0002: TagDef("GPSLatitude", _RATIONAL),
    0x0003: TagDef("GPSLongitudeRef", _ASCII),
    0x0004: TagDef("GPSLongitude", _RATIONAL),
    0x0005: TagDef("GPSAltitudeRef", _BYTE),
    0x0006: TagDef("GPSAltitude", _RATIONAL),
    0x0007: TagDef("GPSTimeStamp", _RATIONAL),
    0x0008: TagDef("GPSSatellites", _ASCII),
    0x0009: TagDef("GPSStatus", _ASCII),
    0x000A: TagDef("GPSMeasureMode", _ASCII),
    0x000B: TagDef("GPSDOP", _RATIONAL),
    0x000C: TagDef("GPSSpeedRef", _ASCII),
    0x000D: TagDef("GPSSpeed", _RATIONAL),
    0x000E: TagDef("GPSTrackRef", _ASCII),
    0x000F: TagDef("GPSTrack", _RATIONAL),
    0x0010: TagDef("GPSImgDirectionRef", _ASCII),
    0x0011: TagDef("GPSImgDirection", _RATIONAL),
    0x0012: TagDef("GPSMapDatum", _ASCII),
    0x0013: TagDef("GPSDestLatitudeRef", _ASCII),
    0x0014: TagDef("GPSDestLatitude", _RATIONAL),
    0x0015: TagDef("GPSDestLongitudeRef", _ASCII),
    0x0016: TagDef("GPSDestLongitude", _RATIONAL),
    0x0017: TagDef("GPSDestBearingRef", _ASCII),
    0x0018: TagDef("GPSDestBearing", _RATIONAL),
    0x0019: TagDef("GPSDestDistanceRef", _ASCII),
    0x001A: TagDef("GPSDestDistance", _RATIONAL),
    0x001D: TagDef("GPSDateStamp", _ASCII),
    0x001E: TagDef("GPSDifferential", _SHORT),
}

# Exif sub-IFD tags reuse the main IFD names where they overlap
_CATALOGS: Dict[IFDNamespace, Tuple[Dict[int, TagDef], ...]] = {
    IFDNamespace.MAIN: (MAIN_IFD_TAGS,),
    IFDNamespace.EXIF: (EXIF_IFD_TAGS, MAIN_IFD_TAGS),
    IFDNamespace.GPS: (GPS_IFD_TAGS,),
}


def lookup_tag(tag_id: int, namespace: IFDNamespace = IFDNamespace.MAIN) -> Optional[TagDef]:
    """
    Look up a tag in the catalog for an IFD namespace.

    Args:
        tag_id: 16-bit tag id
        namespace: Namespace of the IFD the entry came from

    Returns:
        TagDef, or None if the tag is not known in that namespace
    """
    for catalog in _CATALOGS[namespace]:
        tag_def = catalog.get(tag_id)
        if tag_def is not None:
            return tag_def
    return None
