from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..dithering import get_backend
from ..errors import InkshotError
from ..options import BIT_DEPTHS, DITHER_METHODS, DitherOptions, supported_methods
from ..processing import FORMATS, ROTATIONS, ScreenshotParams, process_screenshot
from ..raster import BMPHeader


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="inkshot: prepare dashboard screenshots for e-ink displays."
    )
    parser.add_argument("path", nargs="?", help="Screenshot to process (.png/.jpg/.webp/.bmp)")
    parser.add_argument("-o", "--output", help="Output file (default: <name>.eink.<format>)")
    parser.add_argument("--format", choices=FORMATS, default="png", help="Output format (default: png)")
    parser.add_argument("--rotate", type=int, choices=ROTATIONS, help="Rotate clockwise by degrees")
    parser.add_argument("--eink", type=int, metavar="COLORS", help="Legacy e-ink color reduction (2-256)")
    parser.add_argument("--invert", action="store_true", help="Invert two-color e-ink output")
    parser.add_argument("--dither", action="store_true", help="Enable dithering")
    parser.add_argument("--method", choices=DITHER_METHODS, help="Dithering method (default: floyd-steinberg)")
    parser.add_argument("--bit-depth", type=int, choices=BIT_DEPTHS, help="Output bit depth (default: 4)")
    parser.add_argument("--black-level", type=int, help="Black point, percent (0-100)")
    parser.add_argument("--white-level", type=int, help="White point, percent (0-100)")
    parser.add_argument("--no-gamma", action="store_true", help="Keep embedded gamma/profile data")
    parser.add_argument("--backend", help="Dithering backend: pillow or magick (default: $INKSHOT_DITHER_BACKEND)")
    parser.add_argument("--list-methods", action="store_true", help="List dithering methods and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log processing details")
    return parser.parse_args(argv)


def list_methods() -> int:
    for name, info in supported_methods().items():
        marker = " (recommended)" if info["recommended"] else ""
        depths = ", ".join(str(depth) for depth in info["bit_depths"])
        print(f"{name}{marker}: {info['description']} [bit depths: {depths}]")
    return 0


def build_dither_options(args: argparse.Namespace) -> Optional[DitherOptions]:
    values: Dict[str, Any] = {
        "method": args.method,
        "bit_depth": args.bit_depth,
        "black_level": args.black_level,
        "white_level": args.white_level,
    }
    if args.no_gamma:
        values["gamma_correction"] = False
    requested = args.dither or args.no_gamma or any(value is not None for value in values.values())
    if not requested:
        return None
    return DitherOptions.from_mapping(values)


def build_params(args: argparse.Namespace) -> ScreenshotParams:
    return ScreenshotParams(
        format=args.format,
        rotate=args.rotate,
        eink_colors=args.eink,
        invert=args.invert,
        dithering=build_dither_options(args),
    ).validate()


def default_output_path(path: str, fmt: str) -> str:
    stem = path.rsplit(".", 1)[0] if "." in path else path
    return f"{stem}.eink.{fmt}"


def describe_output(data: bytes, fmt: str) -> str:
    if fmt != "bmp":
        return f"{len(data)} bytes"
    header = BMPHeader.parse(data)
    return f"{len(data)} bytes, {header.width}x{header.height}, {header.bits_per_pixel}-bit"


def process_file(args: argparse.Namespace, settings: Settings) -> int:
    params = build_params(args)
    backend = get_backend(args.backend or settings.backend, settings.magick_path)
    with open(args.path, "rb") as handle:
        source = handle.read()
    result = asyncio.run(process_screenshot(source, params, backend))
    output = args.output or default_output_path(args.path, params.format)
    with open(output, "wb") as handle:
        handle.write(result.data)
    print(f"{output}: {describe_output(result.data, result.format)} in {result.elapsed_ms:.0f}ms")
    return 0


def configure_logging(settings: Settings, verbose: bool) -> None:
    level = logging.INFO if verbose else getattr(logging, settings.log_level, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings, args.verbose)
    if args.list_methods:
        return list_methods()
    if not args.path:
        print("Missing screenshot path. Use --help for usage.", file=sys.stderr)
        return 2
    try:
        return process_file(args, settings)
    except (InkshotError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
