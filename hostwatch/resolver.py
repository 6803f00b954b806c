# hostwatch/resolver.py
import ipaddress
import logging
import socket

from hostwatch.errors import ResolutionError
from hostwatch.family import IPV4, IPV6, AddressFamily
from hostwatch.schemas import Target

logger = logging.getLogger(__name__)


def _lookup(host: str, family: AddressFamily, flags: int = 0, getaddrinfo=socket.getaddrinfo) -> tuple[str, int]:
    # SOCK_RAW keeps getaddrinfo from returning one entry per socket type
    infos = getaddrinfo(host, None, family.socket_family, socket.SOCK_RAW, 0, flags)
    if not infos:
        raise socket.gaierror(socket.EAI_NONAME, f"no {family} address for {host}")
    sockaddr = infos[0][4]
    # IPv6 sockaddrs carry the zone of a link-local address as scope id
    scope_id = sockaddr[3] if len(sockaddr) > 3 else 0
    return sockaddr[0], scope_id


def _literal_family(host: str) -> AddressFamily | None:
    addr = host.split("%", 1)[0]
    try:
        ip = ipaddress.ip_address(addr)
    except ValueError:
        return None
    if ip.version == 4:
        return IPV4
    # an IPv4-mapped IPv6 literal still has a 4-byte form
    if ip.ipv4_mapped is not None:
        return IPV4
    return IPV6


def resolve(host: str, getaddrinfo=socket.getaddrinfo) -> tuple[Target, bool]:
    """
    resolve(host) -> (Target, was_hostname)

    Literal addresses keep the family their form implies. Hostnames are tried
    as IPv4 first and fall back to IPv6. Raises ResolutionError when neither
    family yields an address.
    """
    host = (host or "").strip()
    if not host:
        raise ResolutionError(host)

    family = _literal_family(host)
    if family is not None:
        lookup_host = host
        if family is IPV4 and ":" in host:
            lookup_host = str(ipaddress.ip_address(host.split("%", 1)[0]).ipv4_mapped)
        try:
            address, scope_id = _lookup(lookup_host, family, socket.AI_NUMERICHOST, getaddrinfo)
        except OSError as e:
            raise ResolutionError(host, e) from e
        logger.debug("literal %s -> %s (%s)", host, address, family)
        return Target(address=address, family=family, scope_id=scope_id), False

    last_err: OSError | None = None
    for family in (IPV4, IPV6):
        try:
            address, scope_id = _lookup(host, family, 0, getaddrinfo)
        except OSError as e:
            logger.debug("%s lookup for %s failed: %s", family, host, e)
            last_err = e
            continue
        logger.debug("hostname %s -> %s (%s)", host, address, family)
        return Target(address=address, family=family, scope_id=scope_id), True

    raise ResolutionError(host, last_err) from last_err
