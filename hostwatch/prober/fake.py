# hostwatch/prober/fake.py
from collections import deque

from hostwatch.prober.base import Prober
from hostwatch.schemas import ProbeOutcome, Target


class FakeProber(Prober):
    """
    script: list of ProbeOutcome-like dicts (status plus optional fields) handed
    out one per call, with the call's sequence filled in.
    If no scripted outcome is left, returns a timeout outcome.
    """
    def __init__(self, script=None):
        self.script = deque(script or [])
        self.calls = []

    def probe_once(self, target: Target, sequence: int, cancel=None) -> ProbeOutcome:
        self.calls.append((target, sequence))
        if cancel is not None and cancel.is_set():
            return ProbeOutcome("cancelled", sequence)
        if self.script:
            fields = dict(self.script.popleft())
            fields.setdefault("sequence", sequence)
            return ProbeOutcome(**fields)
        # default: timeout
        return ProbeOutcome("timeout", sequence, cause="no scripted reply")
