import argparse
import asyncio
import json
from dataclasses import replace

import cv2

from .core.logging_setup import setup_logger
from .cv import FrameProcessor, color_to_dict, load_corners, save_corners
from .cv.region_store import DEFAULT_CORNERS, parse_corner_list
from .daemon import light_color, run_daemon
from .utils.config import SETTINGS


# ---------- commands ----------

def cmd_run(args):
    settings = SETTINGS
    if args.camera is not None:
        settings = replace(settings, camera=args.camera)
    if args.light_ip is not None:
        settings = replace(settings, light_ip=args.light_ip)
    try:
        asyncio.run(run_daemon(settings, with_web=not args.no_web))
    except KeyboardInterrupt:
        pass


def cmd_sample(args):
    """Band colors of a still image, as JSON."""
    image = cv2.imread(args.image, cv2.IMREAD_COLOR)
    if image is None:
        raise SystemExit(f"cannot read image: {args.image}")
    frame = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    height, width = frame.shape[:2]

    try:
        corners = parse_corner_list(args.corners) if args.corners else load_corners()
    except ValueError as e:
        raise SystemExit(f"invalid corners: {e}")
    processor = FrameProcessor(
        width, height, row_bands=args.row_bands, column_bands=args.column_bands
    )
    processor.set_corners(*corners)
    colors = processor.sample_bands(frame)

    result = {
        "canvas": {"width": width, "height": height},
        "corners": corners.to_dict(),
        "bands": {name: [color_to_dict(c) for c in band] for name, band in colors.items()},
        "light": color_to_dict(light_color(colors)),
    }
    print(json.dumps(result, indent=2))


def cmd_region(args):
    if args.action == "show":
        print(json.dumps(load_corners().to_dict(), indent=2))
    elif args.action == "set":
        try:
            corners = parse_corner_list(args.corners)
        except ValueError as e:
            raise SystemExit(f"invalid corners: {e}")
        path = save_corners(corners)
        print(f"saved region to {path}")
    elif args.action == "reset":
        path = save_corners(DEFAULT_CORNERS)
        print(f"reset region in {path}")


# ---------- arg parsing ----------

def build_parser():
    ap = argparse.ArgumentParser(
        prog="ambiquad", description="Ambient light color from a webcam region"
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("run", help="Capture, sample and drive the light (with web API)")
    r.add_argument("--camera", type=int, help="OpenCV camera index")
    r.add_argument("--light-ip", help="WiZ light IP (omit for a dry run)")
    r.add_argument("--no-web", action="store_true", help="do not start the web API")
    r.set_defaults(func=cmd_run)

    s = sub.add_parser("sample", help="Print band colors of an image file")
    s.add_argument("image")
    s.add_argument("--corners", help='"x,y x,y x,y x,y" (TL TR BR BL); default: saved region')
    s.add_argument("--row-bands", type=int, default=SETTINGS.row_bands)
    s.add_argument("--column-bands", type=int, default=SETTINGS.column_bands)
    s.set_defaults(func=cmd_sample)

    g = sub.add_parser("region", help="Show or change the saved region")
    g_sub = g.add_subparsers(dest="action", required=True)

    g1 = g_sub.add_parser("show")
    g1.set_defaults(func=cmd_region)

    g2 = g_sub.add_parser("set")
    g2.add_argument("corners", help='"x,y x,y x,y x,y" (TL TR BR BL)')
    g2.set_defaults(func=cmd_region)

    g3 = g_sub.add_parser("reset")
    g3.set_defaults(func=cmd_region)

    return ap


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger()
    args.func(args)
