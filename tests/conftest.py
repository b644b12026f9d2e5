"""
Shared pytest fixtures.

TIFF/EXIF buffers are built byte by byte so every test controls the
exact layout: byte order, entry types, inline vs offset values, and
sub-IFD pointers. Real JPEG/PNG containers come from Pillow.
"""

import io
import struct
import zlib

import pytest
from PIL import Image

BYTE, ASCII, SHORT, LONG, RATIONAL = 1, 2, 3, 4, 5

EXIF_POINTER = 0x8769
GPS_POINTER = 0x8825


class TiffBuilder:
    """
    Builds a TIFF stream with IFD0 and optional Exif, GPS and IFD1 directories.

    Entries are (tag, type, value) tuples. Values are str for ASCII, an int
    or list of ints for BYTE/SHORT/LONG, and a list of (num, den) pairs for
    RATIONAL. A 4-tuple (tag, type, count, raw_bytes) writes the value bytes
    as given, for malformed entries.
    """

    def __init__(self, endian="<"):
        self.endian = endian

    @property
    def marker(self):
        return b"II" if self.endian == "<" else b"MM"

    def pack(self, fmt, *values):
        return struct.pack(self.endian + fmt, *values)

    def encode(self, entry):
        if len(entry) == 4:
            tag, tag_type, count, raw = entry
            return tag, tag_type, count, raw

        tag, tag_type, value = entry
        if tag_type == ASCII:
            raw = value.encode("utf-8") + b"\x00"
            return tag, tag_type, len(raw), raw
        if tag_type == RATIONAL:
            raw = b"".join(self.pack("II", num, den) for num, den in value)
            return tag, tag_type, len(value), raw

        values = value if isinstance(value, (list, tuple)) else [value]
        fmt = {BYTE: "B", SHORT: "H", LONG: "I"}[tag_type]
        raw = b"".join(self.pack(fmt, v) for v in values)
        return tag, tag_type, len(values), raw

    def build(self, ifd0, exif=None, gps=None, thumbnail=None):
        """
        Args:
            ifd0: IFD0 entries
            exif: Exif sub-IFD entries (adds the 0x8769 pointer to IFD0)
            gps: GPS sub-IFD entries (adds the 0x8825 pointer to IFD0)
            thumbnail: JPEG bytes stored through an IFD1 directory

        Returns:
            TIFF bytes with IFD0 at offset 8
        """
        ifd0 = [self.encode(e) for e in ifd0]
        directories = [ifd0]
        pointers = []
        if exif is not None:
            directories.append([self.encode(e) for e in exif])
            pointers.append((EXIF_POINTER, len(directories) - 1))
        if gps is not None:
            directories.append([self.encode(e) for e in gps])
            pointers.append((GPS_POINTER, len(directories) - 1))
        ifd1_index = None
        if thumbnail is not None:
            directories.append([
                (0x0201, LONG, 1, b"\x00" * 4),
                (0x0202, LONG, 1, self.pack("I", len(thumbnail))),
            ])
            ifd1_index = len(directories) - 1
        for tag, _ in pointers:
            ifd0.append((tag, LONG, 1, b"\x00" * 4))

        # Directory offsets are fixed by entry counts
        offsets = []
        position = 8
        for entries in directories:
            offsets.append(position)
            position += 2 + 12 * len(entries) + 4
        data_start = position

        data = bytearray()
        if thumbnail is not None:
            thumbnail_offset = data_start
            data += thumbnail
            directories[ifd1_index][0] = (0x0201, LONG, 1, self.pack("I", thumbnail_offset))
        for tag, index in pointers:
            ifd0[ifd0.index((tag, LONG, 1, b"\x00" * 4))] = (tag, LONG, 1, self.pack("I", offsets[index]))

        out = bytearray(self.marker + self.pack("H", 42) + self.pack("I", 8))
        for index, entries in enumerate(directories):
            out += self.pack("H", len(entries))
            for tag, tag_type, count, raw in sorted(entries, key=lambda e: e[0]):
                if len(raw) <= 4:
                    field = raw.ljust(4, b"\x00")
                else:
                    if len(data) % 2:
                        data += b"\x00"
                    field = self.pack("I", data_start + len(data))
                    data += raw
                out += self.pack("HHI", tag, tag_type, count) + field
            next_ifd = offsets[ifd1_index] if index == 0 and ifd1_index is not None else 0
            out += self.pack("I", next_ifd)

        assert len(out) == data_start
        return bytes(out + data)


def make_jpeg(size=(64, 48), color=(120, 80, 40), quality=85):
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def make_noise_jpeg(size=(256, 256)):
    """A JPEG well above the 10000 byte preview threshold."""
    buf = io.BytesIO()
    Image.effect_noise(size, 64).convert("RGB").save(buf, format="JPEG", quality=95)
    return buf.getvalue()


def insert_app1(jpeg, tiff):
    payload = b"Exif\x00\x00" + tiff
    segment = b"\xff\xe1" + struct.pack(">H", len(payload) + 2) + payload
    return jpeg[:2] + segment + jpeg[2:]


def make_png(size=(64, 48), exif=None):
    buf = io.BytesIO()
    Image.new("RGB", size, color=(10, 20, 30)).save(buf, format="PNG")
    png = buf.getvalue()
    if exif is None:
        return png
    chunk = b"eXIf" + exif
    # After the signature (8) and IHDR chunk (25)
    chunk_bytes = struct.pack(">I", len(exif)) + chunk + struct.pack(">I", zlib.crc32(chunk) & 0xFFFFFFFF)
    return png[:33] + chunk_bytes + png[33:]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(params=["<", ">"], ids=["little-endian", "big-endian"])
def endian(request):
    return request.param


@pytest.fixture
def tiff_builder(endian):
    """TiffBuilder for each byte order."""
    return TiffBuilder(endian)


@pytest.fixture
def le_builder():
    return TiffBuilder("<")


@pytest.fixture
def camera_entries():
    """IFD0, Exif and GPS entries for a typical camera photo."""
    ifd0 = [
        (0x010F, ASCII, "Acme"),
        (0x0110, ASCII, "X100"),
        (0x0112, SHORT, 1),
        (0x0131, ASCII, "Firmware 1.2"),
        (0x8298, ASCII, "(c) Jane Doe"),
    ]
    exif = [
        (0x829A, RATIONAL, [(1, 250)]),
        (0x829D, RATIONAL, [(28, 10)]),
        (0x8827, SHORT, 200),
        (0x9003, ASCII, "2024:05:01 12:30:00"),
        (0x920A, RATIONAL, [(35, 1)]),
        (0xA403, SHORT, 0),
        (0xA434, ASCII, "Acme 35mm F2"),
    ]
    gps = [
        (0x0001, ASCII, "N"),
        (0x0002, RATIONAL, [(40, 1), (26, 1), (46, 1)]),
        (0x0003, ASCII, "W"),
        (0x0004, RATIONAL, [(79, 1), (58, 1), (56, 1)]),
        (0x0005, BYTE, 0),
        (0x0006, RATIONAL, [(3000, 10)]),
    ]
    return ifd0, exif, gps


@pytest.fixture
def camera_tiff(le_builder, camera_entries):
    ifd0, exif, gps = camera_entries
    return le_builder.build(ifd0, exif=exif, gps=gps)


@pytest.fixture
def thumbnail_jpeg():
    return make_jpeg(size=(16, 12))


@pytest.fixture
def camera_jpeg(le_builder, camera_entries, thumbnail_jpeg):
    """A real JPEG carrying an APP1 EXIF block with an IFD1 thumbnail."""
    ifd0, exif, gps = camera_entries
    tiff = le_builder.build(ifd0, exif=exif, gps=gps, thumbnail=thumbnail_jpeg)
    return insert_app1(make_jpeg(), tiff)


@pytest.fixture
def preview_jpeg(le_builder):
    """Large preview JPEG with its own EXIF, as embedded in RAW files."""
    tiff = le_builder.build(
        [(0x010F, ASCII, "PreviewMake")],
        exif=[(0xA434, ASCII, "Preview Lens"), (0xA002, LONG, 256), (0xA003, LONG, 256)],
    )
    return insert_app1(make_noise_jpeg(), tiff)


@pytest.fixture
def raw_file(le_builder, preview_jpeg):
    """TIFF-based RAW: IFD0 metadata, a small thumbnail and a large preview."""
    tiff = le_builder.build([
        (0x010F, ASCII, "Acme"),
        (0x0110, ASCII, "R1"),
    ])
    return tiff + make_jpeg(size=(16, 16)) + b"\x00" * 64 + preview_jpeg + b"\x00" * 128
