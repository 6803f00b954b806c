# hostwatch/watch/state.py
from collections import Counter
from dataclasses import dataclass, field

from hostwatch.schemas import ProbeOutcome


@dataclass
class WatchState:
    sequence: int = 1          # next sequence to send
    attempts: int = 0
    stop_reason: str | None = None
    last: ProbeOutcome | None = None
    # per-status book-keeping
    outcomes: Counter = field(default_factory=Counter)

    def record(self, outcome: ProbeOutcome) -> None:
        self.attempts += 1
        self.last = outcome
        self.outcomes[outcome.status] += 1

    def advance(self) -> None:
        # every attempt consumes a sequence number, whatever its outcome
        self.sequence += 1
