# tests/test_report.py
import pytest

from hostwatch import report
from hostwatch.schemas import ProbeOutcome


def test_success_line_carries_peer_seq_time_family(v6_target):
    line = report.describe(ProbeOutcome("success", 4, peer="2001:db8::1", rtt_ms=21.5), v6_target)
    assert "2001:db8::1" in line
    assert "seq=4" in line
    assert "21.500 ms" in line
    assert "IPv6" in line


def test_protocol_mismatch_names_the_icmp_type(v4_target):
    out = ProbeOutcome("protocol_mismatch", 2, peer="198.51.100.1", icmp_type=11, icmp_code=0)
    line = report.describe(out, v4_target)
    assert "time exceeded" in line
    assert "198.51.100.1" in line


def test_correlation_mismatch_shows_observed_fields(v4_target):
    out = ProbeOutcome("correlation_mismatch", 2, peer="192.0.2.1", observed_id=77, observed_seq=1)
    line = report.describe(out, v4_target)
    assert "ID=77" in line and "seq=1" in line


@pytest.mark.parametrize("status,cause", [
    ("timeout", "no reply within 3s"),
    ("transport_error", "Operation not permitted"),
    ("malformed_reply", "message too short: 2 bytes"),
])
def test_failure_lines_keep_cause(v4_target, status, cause):
    line = report.describe(ProbeOutcome(status, 6, peer="192.0.2.1", cause=cause), v4_target)
    assert line.startswith("Ping 6 to 192.0.2.1")
    assert cause in line


def test_resolved_line(v4_target):
    assert report.resolved_line(v4_target) == "Resolved to: 192.0.2.1 (IPv4)"
