# hostwatch/watch/controller.py

import logging
import threading
import time
from typing import Callable, Optional

from hostwatch.config import Settings
from hostwatch.schemas import ProbeOutcome, Target
from hostwatch.watch.state import WatchState

logger = logging.getLogger(__name__)


class WatchController:
    """Probe a target once per interval until it answers (or we are told to stop)."""

    def __init__(self, prober, settings: Optional[Settings] = None, sleep=time.sleep):
        self.prober = prober
        self.s = settings or Settings()
        self.sleep = sleep

    def _pause(self, cancel: Optional[threading.Event]) -> bool:
        """Wait one interval. Returns True if cancellation arrived meanwhile."""
        if cancel is None:
            self.sleep(self.s.interval_s)
            return False
        return cancel.wait(self.s.interval_s)

    def run(self, target: Target,
            cancel: Optional[threading.Event] = None,
            on_outcome: Optional[Callable[[ProbeOutcome], None]] = None) -> dict:
        st = WatchState()

        while True:
            if cancel is not None and cancel.is_set():
                st.stop_reason = "cancelled"
                break
            if self.s.max_attempts is not None and st.attempts >= self.s.max_attempts:
                st.stop_reason = "max_attempts"
                break

            outcome = self.prober.probe_once(target, st.sequence, cancel=cancel)
            st.record(outcome)
            logger.debug("attempt %d seq=%d -> %s", st.attempts, st.sequence, outcome.status)

            if outcome.status != "cancelled" and on_outcome is not None:
                on_outcome(outcome)

            if outcome.ok:
                st.stop_reason = "success"
                break
            if outcome.status == "cancelled":
                st.stop_reason = "cancelled"
                break

            st.advance()
            if self._pause(cancel):
                st.stop_reason = "cancelled"
                break

        last = st.last
        return {
            "target": target.address,
            "family": target.family.name,
            "stop_reason": st.stop_reason,
            "attempts": st.attempts,
            "last_sequence": last.sequence if last else None,
            "outcomes": dict(st.outcomes),
            "rtt_ms": last.rtt_ms if last is not None and last.ok else None,
        }
