# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for metaimage

Prints the metadata of an image file as grouped text, JSON or CSV and
can write the embedded RAW preview or EXIF thumbnail to disk.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from metaimage.core import MetaImage
from metaimage.exceptions import MetaImageError
from metaimage.file_validator import MAX_FILE_SIZE

SECTION_TITLES = (
    ('camera', "Camera Information"),
    ('gps', "GPS Location"),
    ('author', "Author & Copyright"),
    ('additional', "Additional Metadata"),
)


def _json_default(value: Any) -> str:
    return str(value)


def format_output(metadata: dict, format_type: str = "text") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Dictionary of metadata
        format_type: Output format ('text', 'json', 'csv')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False, default=_json_default)
    elif format_type == "csv":
        lines = ["Tag,Value"]
        for tag, value in sorted(metadata.items()):
            # Escape quotes in CSV
            value_str = str(value).replace('"', '""')
            lines.append(f'"{tag}","{value_str}"')
        return "\n".join(lines)
    else:  # text format (default)
        lines = []
        for tag, value in sorted(metadata.items()):
            lines.append(f"{tag}: {value}")
        return "\n".join(lines)


def format_summary(summary: Dict[str, Any]) -> str:
    """Render MetaImage.get_summary() as text sections."""
    lines = ["File Information"]
    for key, value in summary['file'].items():
        lines.append(f"  {key}: {value}")

    dimensions = summary['dimensions']
    if dimensions:
        lines.append(f"  Dimensions: {dimensions['Width']} x {dimensions['Height']}")
        lines.append(f"  Megapixels: {dimensions['Megapixels']}")
    if not summary['previewable']:
        lines.append("  Preview: not available")

    for section, title in SECTION_TITLES:
        rows = summary['metadata'][section]
        if not rows:
            continue
        lines.append("")
        lines.append(title)
        for label, value in rows:
            lines.append(f"  {label}: {value}")

    return "\n".join(lines)


def render_metadata(image: MetaImage, format_type: str = "text") -> str:
    """Format an opened image as grouped text, or its raw record as JSON/CSV."""
    if format_type == "text":
        return format_summary(image.get_summary())
    return format_output(image.get_all_metadata(), format_type)


def read_metadata(
    file_path: Path,
    format_type: str = "text",
    options: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Read metadata from a file.

    Args:
        file_path: Path to the image file
        format_type: Output format
        options: MetaImage options

    Returns:
        Formatted metadata string

    Raises:
        MetaImageError: If the file cannot be validated
        FileNotFoundError: If the file does not exist
    """
    with MetaImage(file_path, options=options) as image:
        return render_metadata(image, format_type)


def _write_bytes(path: Path, data: Optional[bytes], what: str) -> None:
    if data is None:
        print(f"No {what} found", file=sys.stderr)
        return
    path.write_bytes(data)
    print(f"{what.capitalize()} written to {path} ({len(data)} bytes)", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='metaimage',
        description='Read EXIF metadata and embedded previews from image and RAW files',
    )
    parser.add_argument('file', type=Path, help='Image or RAW file to inspect')
    parser.add_argument('-f', '--format', choices=('text', 'json', 'csv'), default='text',
                        help='Output format (default: text)')
    parser.add_argument('--preview-out', type=Path, metavar='PATH',
                        help='Write the embedded RAW preview JPEG to PATH')
    parser.add_argument('--thumbnail-out', type=Path, metavar='PATH',
                        help='Write the EXIF thumbnail JPEG to PATH')
    parser.add_argument('--max-size', type=int, default=MAX_FILE_SIZE, metavar='BYTES',
                        help='Reject files larger than BYTES')
    parser.add_argument('--no-verify', action='store_true',
                        help='Skip the image decode check')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    options = {
        'MaxFileSize': args.max_size,
        'VerifyImage': not args.no_verify,
    }

    try:
        if not (args.preview_out or args.thumbnail_out):
            print(read_metadata(args.file, args.format, options))
            return 0

        with MetaImage(args.file, options=options) as image:
            print(render_metadata(image, args.format))
            if args.preview_out:
                _write_bytes(args.preview_out, image.get_preview(), "preview")
            if args.thumbnail_out:
                _write_bytes(args.thumbnail_out, image.get_thumbnail(), "thumbnail")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MetaImageError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
