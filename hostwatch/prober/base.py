# hostwatch/prober/base.py
import threading
from abc import ABC, abstractmethod
from typing import Optional

from hostwatch.schemas import ProbeOutcome, Target


class Prober(ABC):
    @abstractmethod
    def probe_once(self, target: Target, sequence: int,
                   cancel: Optional[threading.Event] = None) -> ProbeOutcome:
        """Send exactly one echo request to target and return its ProbeOutcome."""
        raise NotImplementedError
