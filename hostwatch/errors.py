# hostwatch/errors.py


class HostwatchError(Exception):
    """Base class for errors raised by hostwatch."""


class ResolutionError(HostwatchError):
    """No address could be found for the host in either family."""

    def __init__(self, host: str, cause: BaseException | None = None):
        self.host = host
        self.cause = cause
        msg = f"cannot resolve {host!r}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)


class MalformedPacket(HostwatchError, ValueError):
    """Bytes could not be parsed as an ICMP message."""
