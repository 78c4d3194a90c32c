from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import create_decoder
from .exceptions import LcdError
from .image import LuminanceImage
from .markup import mark_samples

_LOGGER = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="meterman-lcd", description="Decode 7 segment LCD digits from meter images")
    ap.add_argument("config", help="JSON decoder description (templates and digits)")
    ap.add_argument("images", nargs="+", help="Images to decode")
    ap.add_argument("--calibrate", metavar="STRING", help="Calibrate from the first image, which shows STRING")
    ap.add_argument("--levels", metavar="FILE", help="Restore calibration levels from FILE, and save them back")
    ap.add_argument("--mark", metavar="OUT", help="Write the first image with sample regions marked to OUT")
    ap.add_argument("--inverse", action="store_true", help="Bright segments are on (LED displays)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("PIL").setLevel(logging.WARNING)

    try:
        overrides = {"inverse": True} if args.inverse else {}
        dec = create_decoder(args.config, **overrides)
        if args.levels and dec.restore_file(args.levels):
            dec.pick_calibration()
        images = [LuminanceImage.open(p) for p in args.images]
        if args.calibrate:
            dec.calibrate_from_image(images[0], args.calibrate)
        if args.mark:
            mark_samples(dec, images[0], fill=True).save(args.mark)
        failed = False
        for path, img in zip(args.images, images):
            res = dec.decode(img)
            if res.invalid:
                failed = True
                dec.bad()
            else:
                dec.good()
            print(f"{path}: {res.text!r} (invalid {res.invalid})")
        if args.levels:
            dec.recalibrate()
            dec.save_file(args.levels)
    except (LcdError, OSError) as err:
        _LOGGER.error("%s", err)
        return 2
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
