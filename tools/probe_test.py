# tools/probe_test.py
# Usage: sudo python3 tools/probe_test.py 8.8.8.8 5
import json
import sys

from hostwatch.errors import ResolutionError
from hostwatch.prober.icmp import IcmpProber
from hostwatch.resolver import resolve


def main(argv=None, prober=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: python tools/probe_test.py <target_ip_or_host> [seq]")
        return 1
    host = argv[0]
    try:
        seq = int(argv[1]) if len(argv) > 1 else 1
    except ValueError:
        print("Usage: python tools/probe_test.py <target_ip_or_host> [seq]")
        return 1
    try:
        target, _ = resolve(host)
    except ResolutionError as e:
        print(f"error: {e}")
        return 1
    p = prober or IcmpProber()
    outcome = p.probe_once(target, seq)
    ev = {"target": target.address, "family": target.family.name, **outcome.to_dict()}
    print(json.dumps(ev, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
