# hostwatch/prober/icmp.py
import logging
import socket
import threading
import time
from contextlib import closing
from typing import Optional

from hostwatch.config import Settings
from hostwatch.errors import MalformedPacket
from hostwatch.family import IPV4, AddressFamily
from hostwatch.prober.base import Prober
from hostwatch.prober.packet import echo_request, marshal, strip_ipv4_header
from hostwatch.prober.rules import classify_reply
from hostwatch.schemas import ProbeOutcome, Target

logger = logging.getLogger(__name__)

PRIVILEGE_HINT = "raw ICMP sockets usually need root (or CAP_NET_RAW)"


class IcmpProber(Prober):
    """
    Sends one ICMP echo request per call over a fresh raw socket and waits up
    to settings.read_timeout_s for the answer. The socket lives exactly as long
    as the call. Failures come back as ProbeOutcome values, never as exceptions.
    """

    def __init__(self,
                 settings: Optional[Settings] = None,
                 socket_factory=socket.socket,
                 clock=time.monotonic):
        self.settings = settings or Settings()
        self.socket_factory = socket_factory
        self.clock = clock

    def _open_socket(self, family: AddressFamily):
        sock = self.socket_factory(family.socket_family, socket.SOCK_RAW, family.protocol)
        try:
            sock.bind((family.wildcard, 0))
        except OSError:
            sock.close()
            raise
        logger.debug("opened raw %s socket bound to %s", family, family.wildcard)
        return sock

    def probe_once(self, target: Target, sequence: int,
                   cancel: Optional[threading.Event] = None) -> ProbeOutcome:
        if cancel is not None and cancel.is_set():
            return ProbeOutcome("cancelled", sequence)

        try:
            sock = self._open_socket(target.family)
        except PermissionError as e:
            return ProbeOutcome("transport_error", sequence,
                                cause=f"creating {target.family} ICMP socket: {e} ({PRIVILEGE_HINT})")
        except OSError as e:
            return ProbeOutcome("transport_error", sequence,
                                cause=f"creating {target.family} ICMP socket: {e}")

        with closing(sock):
            return self._exchange(sock, target, sequence, cancel)

    def _exchange(self, sock, target: Target, sequence: int,
                  cancel: Optional[threading.Event]) -> ProbeOutcome:
        s = self.settings
        family = target.family
        msg = echo_request(family.protocol, s.identifier, sequence, s.payload)
        wire = marshal(msg, family.protocol)

        start = self.clock()
        try:
            sock.sendto(wire, target.sockaddr)
        except OSError as e:
            return ProbeOutcome("transport_error", sequence, cause=f"sending to {target.address}: {e}")
        logger.debug("sent echo id=%d seq=%d to %s (%d bytes)",
                     s.identifier, sequence, target.address, len(wire))

        deadline = start + s.read_timeout_s
        while True:
            if cancel is not None and cancel.is_set():
                return ProbeOutcome("cancelled", sequence)
            remaining = deadline - self.clock()
            if remaining <= 0:
                return ProbeOutcome("timeout", sequence,
                                    cause=f"no reply within {s.read_timeout_s:g}s")
            try:
                sock.settimeout(min(remaining, s.cancel_poll_s))
                data, addr = sock.recvfrom(s.recv_bufsize)
            except socket.timeout:
                continue
            except OSError as e:
                # read errors count as "no answer this round"
                return ProbeOutcome("timeout", sequence, cause=str(e))
            break

        rtt_ms = (self.clock() - start) * 1000.0
        peer = addr[0]
        logger.debug("received %d bytes from %s after %.3f ms", len(data), peer, rtt_ms)

        if family is IPV4:
            try:
                data = strip_ipv4_header(data)
            except MalformedPacket as e:
                return ProbeOutcome("malformed_reply", sequence, peer=peer, cause=str(e))

        return classify_reply(data, peer, family, s.identifier, sequence, rtt_ms)
