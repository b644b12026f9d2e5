"""
Unit tests for metaimage/exif_parser.py.
"""

import struct

import pytest
from conftest import ASCII, insert_app1, make_jpeg, make_png

from metaimage.exceptions import InvalidContainerError
from metaimage.exif_parser import (
    ExifParser,
    ParseStatus,
    find_jpeg_exif,
    find_png_exif,
    parse_tiff,
    read_tiff_header,
)
from metaimage.geolocation import gps_coordinates


# ---------------------------------------------------------------------------
# TIFF entry point
# ---------------------------------------------------------------------------


def test_camera_round_trip(tiff_builder, camera_entries):
    ifd0, exif, gps = camera_entries
    result = parse_tiff(tiff_builder.build(ifd0, exif=exif, gps=gps))

    assert result.status == ParseStatus.OK
    assert result.endian == tiff_builder.endian
    assert result.metadata["Make"] == "Acme"
    assert result.metadata["Model"] == "X100"
    lat, lon = gps_coordinates(result.metadata)
    assert lat == pytest.approx(40.446111, abs=1e-6)
    assert lon == pytest.approx(-79.982222, abs=1e-6)


@pytest.mark.parametrize("data", [
    b"",
    b"I",
    b"XX*\x00\x08\x00\x00\x00",
    b"GIF89a" + b"\x00" * 20,
])
def test_invalid_container_gives_empty_record(data):
    result = parse_tiff(data)
    assert result.metadata == {}
    assert result.status == ParseStatus.INVALID_CONTAINER


def test_header_too_short():
    with pytest.raises(InvalidContainerError):
        read_tiff_header(b"II*\x00")


def test_non_standard_magic_still_parses(le_builder):
    tiff = bytearray(le_builder.build([(0x010F, ASCII, "Olympus")]))
    tiff[2:4] = b"RO"
    result = parse_tiff(bytes(tiff))
    assert result.status == ParseStatus.OK
    assert result.metadata == {"Make": "Olympus"}


def test_first_ifd_offset_out_of_bounds():
    result = parse_tiff(b"II*\x00" + struct.pack("<I", 5000))
    assert result.status == ParseStatus.OK
    assert result.metadata == {}


def test_parse_never_raises_on_garbage():
    garbage = b"MM\x00*" + bytes(range(256)) * 4
    result = parse_tiff(garbage)
    assert isinstance(result.metadata, dict)


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


def test_find_jpeg_exif(camera_tiff):
    jpeg = insert_app1(make_jpeg(), camera_tiff)
    assert find_jpeg_exif(jpeg) == camera_tiff


def test_jpeg_without_exif():
    jpeg = make_jpeg()
    assert find_jpeg_exif(jpeg) is None

    parser = ExifParser(jpeg)
    assert parser.read() == {}
    assert parser.status == ParseStatus.NO_EXIF


def test_exif_parser_jpeg(camera_tiff):
    parser = ExifParser(insert_app1(make_jpeg(), camera_tiff))
    metadata = parser.read()

    assert parser.status == ParseStatus.OK
    assert parser.tiff_data == camera_tiff
    assert metadata["LensModel"] == "Acme 35mm F2"
    assert metadata["ExposureTime"] == pytest.approx(0.004)


def test_find_png_exif(camera_tiff):
    png = make_png(exif=camera_tiff)
    assert find_png_exif(png) == camera_tiff
    assert find_png_exif(make_png()) is None


def test_png_exif_with_jpeg_style_header(camera_tiff):
    png = make_png(exif=b"Exif\x00\x00" + camera_tiff)
    assert find_png_exif(png) == camera_tiff


def test_exif_parser_png(camera_tiff):
    parser = ExifParser(make_png(exif=camera_tiff))
    assert parser.read()["Model"] == "X100"
    assert parser.status == ParseStatus.OK


def test_exif_parser_tiff(camera_tiff):
    parser = ExifParser(camera_tiff)
    assert parser.read()["Copyright"] == "(c) Jane Doe"
    assert parser.endian == "<"


@pytest.mark.parametrize("file_data", [
    b"GIF89a" + b"\x00" * 32,
    b"BM" + b"\x00" * 52,
    b"RIFF\x00\x00\x00\x00WEBPVP8 " + b"\x00" * 20,
])
def test_exif_parser_non_tiff_containers(file_data):
    parser = ExifParser(file_data)
    assert parser.read() == {}
    assert parser.status == ParseStatus.NO_EXIF
    assert parser.tiff_data is None


def test_exif_parser_unknown_bytes():
    parser = ExifParser(b"not an image at all")
    assert parser.read() == {}
    assert parser.status == ParseStatus.INVALID_CONTAINER
