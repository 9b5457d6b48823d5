"""
- HTTP call with clear fallback
Get 4 random digits (0..9) from random.org. If anything goes wrong (no internet,
timeout, bad response), we fall back to a local secure random generator so the game still works.
"""

import logging
from secrets import randbelow

import requests

from . import config
from .types import CODE_LENGTH, Code

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/integers/"


def local_code(length: int = CODE_LENGTH) -> Code:
    # randbelow(10) gives us a number between 0 and 9
    return "".join(str(randbelow(10)) for _ in range(length))


def fetch_code(length: int = CODE_LENGTH) -> Code:
    if not config.USE_RANDOM_ORG:
        return local_code(length)

    # Parameters to send to random.org
    params = {
        "num": length,     # how many numbers we want
        "min": 0,          # smallest allowed number
        "max": 9,          # largest allowed number
        "col": 1,          # one number per line
        "base": 10,        # normal decimal numbers
        "format": "plain", # plain text response
        "rnd": "new",      # always generate new numbers
    }

    try:
        # keep network quick; if it takes too long, we will just fallback
        response = requests.get(RANDOM_URL, params=params, timeout=config.RANDOM_ORG_TIMEOUT)

        # If the response was not 200 OK, this will raise an error
        response.raise_for_status()

        # The body looks like:
        #   0\n3\n9\n2\n
        digits = [int(line) for line in response.text.splitlines() if line.strip()]

        if len(digits) != length:
            raise ValueError(f"random.org returned {len(digits)} values, expected {length}.")
        if any(d < 0 or d > 9 for d in digits):
            raise ValueError("random.org number out of range 0..9.")

        return "".join(str(d) for d in digits)

    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable (%s); using local secure random", exc)
        return local_code(length)
