"""Utility functions for naming clusters."""

import random
import string
import time
from typing import Optional

SUFFIX_CHARS = string.ascii_lowercase + string.digits


def random_suffix(length: int = 5, now_ns: Optional[int] = None) -> str:
    """Generate a short cluster-name suffix such as ``6p7l0``.

    Even positions take a random digit of the current nanosecond timestamp,
    odd positions a random lowercase letter or digit.

    Args:
        length: Number of characters to generate
        now_ns: Timestamp to draw digits from (default: time.time_ns())

    Returns:
        str: The suffix
    """
    digits = str(time.time_ns() if now_ns is None else now_ns)
    return ''.join(
        random.choice(SUFFIX_CHARS) if i % 2 else random.choice(digits)
        for i in range(length)
    )


def generate_cluster_name(prefix: str, platform: str, suffix: Optional[str] = None) -> str:
    """Build ``<prefix>-<platform>-<suffix>``."""
    return f"{prefix}-{platform}-{suffix or random_suffix()}"
