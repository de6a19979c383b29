"""
Command-line adapter over the `Images` facade.

Architectural role:
- Generates transformation URLs and responsive markup from a terminal, for
  template debugging and static builds.
- Uses the same settings/environment as the HTTP adapter.

Commands:
- `url IMAGE [--size NAME] [--viewport V] [--param k=v ...]`
- `tag IMAGE [--widths 375,750] [--sizes VALUE] [--attr k=v ...]`
- `picture [--mobile IMAGE] [--desktop IMAGE] [--breakpoint 640px]`
- `sizes`

Input validation behavior:
- Numeric IMAGE arguments are media ids; anything else is a literal URL.
- Malformed `--widths`/`--param` values exit with an argparse error.
"""

import argparse
import json
import logging
import sys

from srcsetter.config.settings import ImagesSettings
from srcsetter.config.sizes import ViewportSizes
from srcsetter.service import Images


def parse_image(value: str):
    """Media id for digit-only values, literal URL otherwise."""
    value = value.strip()
    return int(value) if value.isdigit() else value


def parse_widths(value: str) -> list[int]:
    try:
        widths = [int(part.strip()) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError("Invalid --widths. Example: 375,750,1100")
    if any(width <= 0 for width in widths):
        raise argparse.ArgumentTypeError("Widths must be positive integers")
    return widths


def parse_pair(value: str) -> tuple[str, object]:
    """Parse `key=value`; integer values are converted."""
    if "=" not in value:
        raise argparse.ArgumentTypeError(f"Expected key=value, got {value!r}")
    key, raw = value.split("=", 1)
    raw = raw.strip()
    return key.strip(), int(raw) if raw.lstrip("-").isdigit() else raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="srcsetter", description="Responsive image URL and markup generator")
    parser.add_argument("--manifest", help="JSON media manifest (id -> url/width/height/alt)")
    parser.add_argument("--sizes-file", help="JSON configuration file containing `image-sizes`")
    parser.add_argument("--verbose", action="store_true", help="Log diagnostics to stderr")

    sub = parser.add_subparsers(dest="command", required=True)

    url = sub.add_parser("url", help="Print a transformation URL")
    url.add_argument("image", type=parse_image)
    url.add_argument("--size", help="Configured size name (supports group.viewport)")
    url.add_argument("--viewport", default="desktop", choices=("desktop", "mobile", "tablet"))
    url.add_argument("--param", type=parse_pair, action="append", default=[])

    tag = sub.add_parser("tag", help="Print a responsive img tag")
    tag.add_argument("image", type=parse_image)
    tag.add_argument("--widths", type=parse_widths, default=[375, 750, 1100, 1500, 2200])
    tag.add_argument("--sizes", default="100vw")
    tag.add_argument("--attr", type=parse_pair, action="append", default=[])
    tag.add_argument("--param", type=parse_pair, action="append", default=[])

    picture = sub.add_parser("picture", help="Print an art-directed picture tag")
    picture.add_argument("--mobile", type=parse_image)
    picture.add_argument("--desktop", type=parse_image)
    picture.add_argument("--breakpoint", default="640px")
    picture.add_argument("--mobile-widths", type=parse_widths, default=[375, 750])
    picture.add_argument("--desktop-widths", type=parse_widths, default=[1100, 1500, 2200])
    picture.add_argument("--attr", type=parse_pair, action="append", default=[])

    sub.add_parser("sizes", help="Print configured sizes as JSON")
    return parser


def build_images(args: argparse.Namespace) -> Images:
    overrides = {}
    if args.manifest:
        overrides["media_manifest"] = args.manifest
    if args.sizes_file:
        overrides["sizes_file"] = args.sizes_file
    settings = ImagesSettings.from_env().merged(overrides)
    return Images.from_settings(settings)


def run(args: argparse.Namespace, images: Images) -> str:
    if args.command == "url":
        if args.size:
            params = images.resolve_size(args.size).for_viewport(args.viewport)
        else:
            params = {}
        params.update(dict(args.param))
        return images.get_url(args.image, params)

    if args.command == "tag":
        return images.create_image_tag(
            args.image,
            sizes=args.sizes,
            widths=args.widths,
            attributes=dict(args.attr),
            params=dict(args.param),
        )

    if args.command == "picture":
        return images.create_picture_tag(
            args.mobile,
            args.desktop,
            breakpoint=args.breakpoint,
            mobile_widths=args.mobile_widths,
            desktop_widths=args.desktop_widths,
            attributes=dict(args.attr),
        )

    sizes = {}
    for name in images.sizes.names():
        config = images.sizes.table[name]
        if isinstance(config, ViewportSizes):
            sizes[name] = {v: config.for_viewport(v) for v in ("desktop", "mobile", "tablet") if config.for_viewport(v)}
        else:
            sizes[name] = config.params
    return json.dumps(sizes, indent=2)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, stream=sys.stderr)

    output = run(args, build_images(args))
    print(output)
    return 0 if output else 1


if __name__ == "__main__":
    sys.exit(main())
