"""Process timers used for progress and benchmark reporting."""

import resource
import time


def cputime() -> float:
    """
    CPU time consumed by this process.

    Returns:
        User plus system CPU seconds
    """
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return usage.ru_utime + usage.ru_stime


def realtime() -> float:
    """Wall-clock time in seconds since the epoch."""
    return time.time()
