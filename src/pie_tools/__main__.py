import argparse
import logging
import os
import sys
from typing import Optional

from PIL import Image

from pie_tools import PIEImage
from pie_tools.errors import PIEError
from pie_tools.version import __version__

try:
    from IPython.lib.pretty import pprint
except ImportError:
    from pprint import pprint

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="pie-tools command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser(
        "convert",
        help="Encode an image to PIE, or decode a PIE file to an image",
        description="Encodes when OUTPUT ends in .pie, decodes when INPUT does.",
    )
    convert_parser.add_argument("input_file", help="Input image or PIE file")
    convert_parser.add_argument("output_file", help="Output PIE or image file")
    convert_parser.add_argument(
        "--no-embed",
        action="store_true",
        help="Do not embed the palette in the PIE file.",
    )
    convert_parser.add_argument(
        "--palette",
        metavar="FILE",
        help="Raw palette file: seeds the palette when encoding, "
        "replaces the embedded palette when decoding.",
    )
    convert_parser.add_argument(
        "--fixed-palette",
        action="store_true",
        help="Fail on colors missing from --palette instead of appending them.",
    )
    convert_parser.add_argument(
        "--export-palette",
        metavar="FILE",
        help="Write the palette of the encoded image to a raw palette file.",
    )

    show_parser = subparsers.add_parser("show", help="Show the file content")
    show_parser.add_argument("input_file", help="Input PIE file")

    debug_parser = subparsers.add_parser("debug", help="Show debug info for PIE file")
    debug_parser.add_argument("input_file", help="Input PIE file")

    return parser.parse_args(argv)


def _is_pie(filename: str) -> bool:
    return filename.lower().endswith(".pie")


def _read_palette(filename: Optional[str]) -> Optional[bytes]:
    if filename is None:
        return None
    with open(filename, "rb") as f:
        return f.read()


def convert(args: argparse.Namespace) -> Optional[int]:
    palette = _read_palette(args.palette)
    if _is_pie(args.input_file):
        pie = PIEImage.open(args.input_file, palette=palette)
        logger.debug("decoding %r" % pie)
        pie.topil().save(args.output_file)
    elif _is_pie(args.output_file):
        with Image.open(args.input_file) as image:
            pie = PIEImage.frompil(
                image,
                embed_palette=not args.no_embed,
                palette=palette,
                extend_palette=not args.fixed_palette,
            )
        logger.debug("encoded %r" % pie)
        pie.save(args.output_file)
        if args.export_palette:
            assert pie.palette is not None
            with open(args.export_palette, "wb") as f:
                pie.palette.write(f)
    else:
        logger.error("Either the input or the output must be a .pie file")
        return 1

    original_size = os.path.getsize(args.input_file)
    written = os.path.getsize(args.output_file)
    if written > original_size:
        print(
            "Success. But, the resulting image is larger. %dB -> %dB"
            % (original_size, written)
        )
    else:
        print("Success. %dB -> %dB" % (original_size, written))
    return None


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("pie_tools").setLevel(logging.DEBUG)
    else:
        logging.getLogger("pie_tools").setLevel(logging.INFO)

    try:
        if args.command == "convert":
            return convert(args)

        elif args.command == "show":
            pie = PIEImage.open(args.input_file)
            pprint(pie)

        elif args.command == "debug":
            pie = PIEImage.open(args.input_file)
            pprint(pie._record)

    except (PIEError, OSError) as e:
        logger.error(str(e))
        return 1

    return None


if __name__ == "__main__":
    sys.exit(main())
