# hostwatch/config.py
import os
from dataclasses import dataclass, field


def process_identifier() -> int:
    """16-bit echo identifier derived from the current process id."""
    return os.getpid() & 0xFFFF


@dataclass
class Settings:
    read_timeout_s: float = 3.0
    interval_s: float = 1.0
    payload: bytes = b"hostwatch ping"
    recv_bufsize: int = 1500

    # generated once per run and threaded through every probe
    identifier: int = field(default_factory=process_identifier)

    # how often a blocked read wakes up to check for cancellation
    cancel_poll_s: float = 0.25

    # None = keep probing until success (tests and tools bound this)
    max_attempts: int | None = None
