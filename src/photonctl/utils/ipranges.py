"""Expand IP range expressions such as ``10.0.0.1, 10.0.0.5-10.0.0.9``."""

from __future__ import annotations

import ipaddress
import re

from photonctl.errors import IpRangeError

_TOKEN_SEPARATOR = re.compile(r"\s*,\s*")
_RANGE_SEPARATOR = re.compile(r"\s*-\s*")


def split_comma_list(value: str | None) -> list[str]:
    """Split a comma-separated option value, dropping surrounding whitespace."""

    if value is None or not value.strip():
        return []
    return [item for item in _TOKEN_SEPARATOR.split(value.strip()) if item]


def _parse_ipv4(raw: str, expression: str) -> ipaddress.IPv4Address:
    try:
        return ipaddress.IPv4Address(raw)
    except ValueError as exc:
        raise IpRangeError(f"bad IP address '{raw}' in range expression '{expression}'") from exc


def parse_ip_ranges(expression: str) -> list[str]:
    """Return every address an expression covers, in token order.

    A token is a single IPv4 address or an inclusive ``low-high`` range.
    Ranges whose low bound is above the high bound are rejected.
    """

    addresses: list[str] = []
    for token in _TOKEN_SEPARATOR.split(expression.strip()):
        parts = _RANGE_SEPARATOR.split(token)
        if len(parts) == 1:
            addresses.append(str(_parse_ipv4(parts[0], expression)))
        elif len(parts) == 2:
            low = _parse_ipv4(parts[0], expression)
            high = _parse_ipv4(parts[1], expression)
            if int(low) > int(high):
                raise IpRangeError(f"bad address range '{token}': {low} is above {high}")
            addresses.extend(str(ipaddress.IPv4Address(value)) for value in range(int(low), int(high) + 1))
        else:
            raise IpRangeError(f"bad address range '{token}' in '{expression}'")
    return addresses
