"""Random tokens used to namespace per-button globals."""

from __future__ import annotations

import logging
import random
import secrets
from typing import Callable

logger = logging.getLogger(__name__)

IdentifierGenerator = Callable[[], str]


def random_token() -> str:
    """Return a short random hex token.

    Uses the OS randomness source when available and falls back to the
    Mersenne Twister otherwise, so generation never fails.
    """
    try:
        return secrets.token_hex(7)
    except NotImplementedError:
        logger.debug("No OS randomness source available; using weak fallback")
        return format(random.getrandbits(32), "x")
