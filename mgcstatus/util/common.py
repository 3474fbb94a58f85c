# Copyright (c) 2023, Crate.io Inc.
# Distributed under the terms of the AGPLv3 license, see LICENSE.
import logging
import os

import colorlog
from colorlog.escape_codes import escape_codes

from mgcstatus.util.data import asbool


def setup_logging(level=logging.INFO, verbose: bool = False, debug: bool = False, width: int = 30):
    reset = escape_codes["reset"]
    log_format = f"%(asctime)-15s [%(name)-{width}s] %(log_color)s%(levelname)-8s:{reset} %(message)s"

    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(log_format))

    logging.basicConfig(format=log_format, level=level, handlers=[handler])

    if verbose:
        logging.getLogger("mgcstatus").setLevel(logging.DEBUG)

    if debug:
        # Optionally tame PyMongo.
        if asbool(os.environ.get("DEBUG_PYMONGO")):
            logging.getLogger("pymongo").setLevel(level)
        else:
            logging.getLogger("pymongo").setLevel(logging.INFO)
