# hostwatch/prober/rules.py
from hostwatch.errors import MalformedPacket
from hostwatch.family import AddressFamily
from hostwatch.prober.packet import EchoBody, parse_message
from hostwatch.schemas import ProbeOutcome


def is_echo_reply(msg, family: AddressFamily) -> bool:
    return msg.type == family.echo_reply_type


def correlates(body: EchoBody, identifier: int, sequence: int) -> bool:
    """A reply is ours only if both identifier and (wrapped) sequence match."""
    return body.identifier == (identifier & 0xFFFF) and body.sequence == (sequence & 0xFFFF)


def classify_reply(data: bytes, peer: str, family: AddressFamily,
                   identifier: int, sequence: int, rtt_ms: float) -> ProbeOutcome:
    """
    Decide what one received ICMP message means for the probe `sequence`.
    Order matters: unparseable -> wrong type -> not an echo body -> not ours.
    Anything that survives all four checks is a success.
    """
    try:
        msg = parse_message(family.protocol, data)
    except MalformedPacket as e:
        return ProbeOutcome("malformed_reply", sequence, peer=peer, cause=str(e))

    # unreachable, time exceeded etc. are real answers, just not pongs
    if not is_echo_reply(msg, family):
        return ProbeOutcome("protocol_mismatch", sequence, peer=peer,
                            icmp_type=msg.type, icmp_code=msg.code)

    body = msg.body
    if not isinstance(body, EchoBody):
        return ProbeOutcome("malformed_reply", sequence, peer=peer, cause="echo reply without echo body")

    if not correlates(body, identifier, sequence):
        return ProbeOutcome("correlation_mismatch", sequence, peer=peer,
                            observed_id=body.identifier, observed_seq=body.sequence)

    return ProbeOutcome("success", sequence, peer=peer, rtt_ms=max(0.0, rtt_ms))
