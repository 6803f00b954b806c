# hostwatch/schemas.py
import socket
from dataclasses import asdict, dataclass
from typing import Literal, Optional

from hostwatch.family import AddressFamily

OutcomeStatus = Literal[
    "success",
    "timeout",
    "transport_error",
    "protocol_mismatch",
    "correlation_mismatch",
    "malformed_reply",
    "cancelled",
]


@dataclass(frozen=True)
class Target:
    address: str
    family: AddressFamily
    # interface index for link-local IPv6 (the %zone suffix), 0 otherwise
    scope_id: int = 0

    @property
    def sockaddr(self) -> tuple:
        if self.family.socket_family == socket.AF_INET6:
            return (self.address, 0, 0, self.scope_id)
        return (self.address, 0)

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class ProbeOutcome:
    """
    Result of exactly one probe attempt. `status` is the tag; the other fields
    are only filled in where they mean something for that status.
    """
    status: OutcomeStatus
    sequence: int
    peer: Optional[str] = None
    rtt_ms: Optional[float] = None
    icmp_type: Optional[int] = None
    icmp_code: Optional[int] = None
    observed_id: Optional[int] = None
    observed_seq: Optional[int] = None
    cause: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}
