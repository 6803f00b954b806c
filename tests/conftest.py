# tests/conftest.py
import socket
import struct
from collections import deque

import pytest

from hostwatch.config import Settings
from hostwatch.family import IPV4, IPV6
from hostwatch.prober.packet import EchoBody, IcmpMessage, marshal, parse_message
from hostwatch.schemas import Target


def ipv4_header(payload_len: int, src: str = "192.0.2.1") -> bytes:
    return struct.pack("!BBHHHBBH4s4s", 0x45, 0, 20 + payload_len, 0, 0, 64, 1, 0,
                       socket.inet_aton(src), socket.inet_aton("192.0.2.99"))


class FakeClock:
    def __init__(self, t: float = 100.0):
        self.t = t

    def __call__(self) -> float:
        return self.t


class FakeRawSocket:
    """
    Stands in for a raw ICMP socket. `responder(sent_bytes)` returns a list of
    (icmp_bytes, peer) replies to queue after each sendto; an empty queue makes
    recvfrom time out after advancing the fake clock by the socket timeout.
    """

    def __init__(self, family, responder=None, clock=None,
                 send_error=None, recv_error=None, bind_error=None, wrap_ipv4=True):
        self.family = family
        self.responder = responder
        self.clock = clock
        self.send_error = send_error
        self.recv_error = recv_error
        self.bind_error = bind_error
        self.wrap_ipv4 = wrap_ipv4
        self.sent = []
        self.bound = None
        self.closed = False
        self.timeout = None
        self.replies = deque()

    def bind(self, addr):
        if self.bind_error:
            raise self.bind_error
        self.bound = addr

    def settimeout(self, t):
        self.timeout = t

    def sendto(self, data, addr):
        if self.send_error:
            raise self.send_error
        self.sent.append((data, addr))
        if self.responder:
            for icmp, peer in self.responder(data):
                if self.family == socket.AF_INET and self.wrap_ipv4:
                    icmp = ipv4_header(len(icmp), peer) + icmp
                self.replies.append((icmp, peer))
        return len(data)

    def recvfrom(self, bufsize):
        if self.recv_error:
            raise self.recv_error
        if self.replies:
            if self.clock is not None:
                self.clock.t += 0.012
            data, peer = self.replies.popleft()
            if self.family == socket.AF_INET6:
                return data[:bufsize], (peer, 0, 0, 0)
            return data[:bufsize], (peer, 0)
        if self.clock is not None:
            self.clock.t += self.timeout
        raise socket.timeout("timed out")

    def close(self):
        self.closed = True


class SocketFactory:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.created = []

    def __call__(self, family, type_, proto):
        assert type_ == socket.SOCK_RAW
        sock = FakeRawSocket(family, **self.kwargs)
        sock.proto = proto
        self.created.append(sock)
        return sock


def echo_responder(protocol, reply_type, peer, seq_offset=0, ident_offset=0):
    """Answers every request with an echo reply carrying its id/seq (optionally shifted)."""
    def respond(data):
        req = parse_message(protocol, data)
        body = req.body
        reply = IcmpMessage(
            type=reply_type,
            code=0,
            body=EchoBody(body.identifier + ident_offset, body.sequence + seq_offset, body.data),
        )
        return [(marshal(reply, protocol), peer)]
    return respond


@pytest.fixture
def settings():
    return Settings(identifier=0x1234, interval_s=0.0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def v4_target():
    return Target(address="192.0.2.1", family=IPV4)


@pytest.fixture
def v6_target():
    return Target(address="2001:db8::1", family=IPV6)
