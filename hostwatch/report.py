# hostwatch/report.py
"""Operator-facing console lines. Wording is free; the facts in each line are not."""

from hostwatch.prober.packet import icmp_type_name
from hostwatch.schemas import ProbeOutcome, Target


def watching_line(host: str) -> str:
    return f"Watching host: {host}"


def resolved_line(target: Target) -> str:
    return f"Resolved to: {target.address} ({target.family})"


def banner() -> str:
    return "\nPinging until host responds... (Press Ctrl+C to stop)"


def success_line(host: str) -> str:
    return f"\nHost {host} is now responding!"


def describe(outcome: ProbeOutcome, target: Target) -> str:
    seq = outcome.sequence
    st = outcome.status

    if st == "success":
        return (f"PING reply from {outcome.peer}: seq={seq} "
                f"time={outcome.rtt_ms:.3f} ms ({target.family})")
    if st == "timeout":
        return f"Ping {seq} to {target}: timeout or error ({outcome.cause})"
    if st == "transport_error":
        return f"Ping {seq} to {target}: error: {outcome.cause}"
    if st == "protocol_mismatch":
        name = icmp_type_name(target.family.protocol, outcome.icmp_type)
        return (f"Ping {seq} to {target}: received ICMP {name} "
                f"(type={outcome.icmp_type}, code={outcome.icmp_code}) from {outcome.peer}")
    if st == "correlation_mismatch":
        return (f"Ping {seq} to {target}: received Echo Reply with wrong ID/seq "
                f"(ID={outcome.observed_id}, seq={outcome.observed_seq}) from {outcome.peer}")
    if st == "malformed_reply":
        return f"Ping {seq} to {target}: received malformed reply from {outcome.peer} ({outcome.cause})"
    if st == "cancelled":
        return f"Ping {seq} to {target}: cancelled"
    return f"Ping {seq} to {target}: {st}"
