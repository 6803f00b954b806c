# hostwatch/prober/packet.py
"""
ICMP wire format for echo probing.

Every ICMP message (RFC 792 for IPv4, RFC 4443 for IPv6) starts with the same
4-byte header: type (8 bits) + code (8 bits) + checksum (16 bits). Echo request
and echo reply carry a 4-byte echo header after it, identifier (16 bits) +
sequence number (16 bits), followed by opaque data that the peer copies back.

ICMP has no ports, so identifier + sequence are the only way to tell which
request a reply belongs to.
"""
import struct
from dataclasses import dataclass
from typing import Optional, Union

from hostwatch.errors import MalformedPacket

ICMP_HEADER = struct.Struct("!BBH")
ECHO_HEADER = struct.Struct("!HH")

PROTO_ICMP = 1
PROTO_ICMPV6 = 58

# (request, reply) echo types per protocol
_ECHO_TYPES = {
    PROTO_ICMP: (8, 0),
    PROTO_ICMPV6: (128, 129),
}

_TYPE_NAMES = {
    PROTO_ICMP: {
        0: "echo reply",
        3: "destination unreachable",
        4: "source quench",
        5: "redirect",
        8: "echo",
        11: "time exceeded",
        12: "parameter problem",
        13: "timestamp",
        14: "timestamp reply",
    },
    PROTO_ICMPV6: {
        1: "destination unreachable",
        2: "packet too big",
        3: "time exceeded",
        4: "parameter problem",
        128: "echo request",
        129: "echo reply",
        133: "router solicitation",
        134: "router advertisement",
        135: "neighbor solicitation",
        136: "neighbor advertisement",
        137: "redirect",
    },
}


@dataclass(frozen=True)
class EchoBody:
    identifier: int
    sequence: int
    data: bytes = b""


@dataclass(frozen=True)
class IcmpMessage:
    type: int
    code: int
    body: Union[EchoBody, bytes]
    checksum: int = 0


def checksum(data: bytes) -> int:
    """Compute the Internet checksum (RFC 1071) over *data*.

    Odd-length input is padded with a zero byte, 16-bit words are summed,
    carries are folded back in and the one's complement is returned.
    """
    if len(data) % 2:
        data += b"\x00"

    total = 0
    for i in range(0, len(data), 2):
        total += (data[i] << 8) + data[i + 1]

    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)

    return ~total & 0xFFFF


def is_echo_type(protocol: int, icmp_type: int) -> bool:
    return icmp_type in _ECHO_TYPES.get(protocol, ())


def icmp_type_name(protocol: int, icmp_type: int) -> str:
    name = _TYPE_NAMES.get(protocol, {}).get(icmp_type)
    if name is None:
        return f"type {icmp_type}"
    return name


def echo_request(protocol: int, identifier: int, sequence: int, data: bytes) -> IcmpMessage:
    """Build an echo request; the sequence wraps at 16 bits like on the wire."""
    req_type, _ = _ECHO_TYPES[protocol]
    return IcmpMessage(
        type=req_type,
        code=0,
        body=EchoBody(identifier & 0xFFFF, sequence & 0xFFFF, bytes(data)),
    )


def marshal(message: IcmpMessage, protocol: int, pseudo_header: Optional[bytes] = None) -> bytes:
    """
    marshal(IcmpMessage, protocol) -> bytes

    For ICMPv4 the checksum covers the ICMP message only. For ICMPv6 it also
    covers an IPv6 pseudo-header (source, destination, length, next header);
    without one the field is left zero and the kernel fills it on raw sockets.
    """
    if protocol not in _ECHO_TYPES:
        raise ValueError(f"not an ICMP protocol number: {protocol}")

    if isinstance(message.body, EchoBody):
        b = message.body
        body = ECHO_HEADER.pack(b.identifier & 0xFFFF, b.sequence & 0xFFFF) + b.data
    else:
        body = bytes(message.body)

    raw = ICMP_HEADER.pack(message.type, message.code, 0) + body

    if protocol == PROTO_ICMP:
        csum = checksum(raw)
    elif pseudo_header is not None:
        csum = checksum(pseudo_header + raw)
    else:
        return raw

    return raw[:2] + struct.pack("!H", csum) + raw[4:]


def parse_message(protocol: int, data: bytes) -> IcmpMessage:
    """Parse *data* (starting at the ICMP header) as an ICMP message."""
    if protocol not in _ECHO_TYPES:
        raise MalformedPacket(f"not an ICMP protocol number: {protocol}")
    if len(data) < ICMP_HEADER.size:
        raise MalformedPacket(f"message too short: {len(data)} bytes")

    icmp_type, code, csum = ICMP_HEADER.unpack_from(data)
    rest = bytes(data[ICMP_HEADER.size:])

    if not is_echo_type(protocol, icmp_type):
        return IcmpMessage(type=icmp_type, code=code, body=rest, checksum=csum)

    if len(rest) < ECHO_HEADER.size:
        raise MalformedPacket(f"echo body too short: {len(rest)} bytes")
    ident, seq = ECHO_HEADER.unpack_from(rest)
    body = EchoBody(ident, seq, rest[ECHO_HEADER.size:])
    return IcmpMessage(type=icmp_type, code=code, body=body, checksum=csum)


def strip_ipv4_header(data: bytes) -> bytes:
    """
    IPv4 raw sockets hand back the IP header in front of the ICMP message;
    IPv6 raw sockets do not. Drop it using the IHL field when present.
    """
    if len(data) < 20 or data[0] >> 4 != 4:
        return data
    ihl = (data[0] & 0x0F) * 4
    if ihl < 20 or ihl > len(data):
        raise MalformedPacket(f"bad IPv4 header length: {ihl}")
    return data[ihl:]
