# hostwatch/family.py
import socket
from dataclasses import dataclass


@dataclass(frozen=True)
class AddressFamily:
    """Everything that differs between ICMPv4 and ICMPv6 probing."""
    name: str                 # "IPv4" | "IPv6"
    socket_family: int
    wildcard: str             # bind address for the listening socket
    protocol: int             # IP protocol number of ICMP for this family
    echo_request_type: int
    echo_reply_type: int

    def __str__(self) -> str:
        return self.name


IPV4 = AddressFamily(
    name="IPv4",
    socket_family=socket.AF_INET,
    wildcard="0.0.0.0",
    protocol=1,
    echo_request_type=8,
    echo_reply_type=0,
)

IPV6 = AddressFamily(
    name="IPv6",
    socket_family=socket.AF_INET6,
    wildcard="::",
    protocol=58,
    echo_request_type=128,
    echo_reply_type=129,
)
