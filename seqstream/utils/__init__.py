"""
Process-level helpers.

This module provides:
- Fail-fast file open/read/write/flush/close wrappers
- CPU and wall-clock timers
"""

from seqstream.utils.files import (
    fatal,
    xopen,
    xzopen,
    xread,
    xwrite,
    xflush,
    xclose,
    EXIT_FAILURE,
)

from seqstream.utils.timer import (
    cputime,
    realtime,
)

__all__ = [
    "fatal",
    "xopen",
    "xzopen",
    "xread",
    "xwrite",
    "xflush",
    "xclose",
    "EXIT_FAILURE",
    "cputime",
    "realtime",
]
