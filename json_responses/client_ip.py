"""
Client IP Module

This module works out the address of the client that sent a request. Reverse
proxies put the original address in the ``X-Forwarded-For`` or ``X-Real-IP``
headers, so those are checked before the address of the connection itself.
"""

import ipaddress


def is_valid_ip(value):
    """
    Checks whether a string is an IPv4 or IPv6 address literal.

    Args:
        value (str): Candidate address.

    Returns:
        bool: True if ``value`` parses as an IP address.
    """
    if not value:
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def split_host_port(address):
    """
    Splits a ``host:port`` address into its host and port parts.

    IPv6 hosts must be bracketed, e.g. ``[::1]:8080``.

    Args:
        address (str): Connection-level remote address.

    Returns:
        tuple: ``(host, port)``, or None if ``address`` is not in host:port form.
    """
    if not address:
        return None

    if address.startswith("["):
        end = address.find("]")
        if end == -1 or address[end + 1:end + 2] != ":":
            return None
        return address[1:end], address[end + 2:]

    host, sep, port = address.rpartition(":")
    # An unbracketed host with a colon in it is ambiguous (bare IPv6)
    if not sep or ":" in host:
        return None
    return host, port


def header_values(headers, name):
    """Return every value of a header, matching the name case-insensitively."""
    if headers is None:
        return []

    # werkzeug Headers (and anything like it) already match case-insensitively
    getlist = getattr(headers, "getlist", None)
    if callable(getlist):
        return [value for value in getlist(name) if value is not None]

    values = []
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() != wanted or value is None:
            continue
        if isinstance(value, (list, tuple)):
            values.extend(value)
        else:
            values.append(value)
    return values


def resolve_client_ip(headers, remote_addr):
    """
    Resolves the most trustworthy client address for a request.

    The first match wins:
        1. The first valid address in ``X-Forwarded-For`` (malformed entries are skipped).
        2. ``X-Real-IP`` if it is a valid address.
        3. The host part of ``remote_addr`` if it is in host:port form.
        4. ``remote_addr`` as given, which may still include a port.

    Args:
        headers: Request headers (werkzeug ``Headers`` or a mapping).
        remote_addr (str): Connection-level remote address.

    Returns:
        str: The client address. Never raises on malformed input.
    """
    for forwarded in header_values(headers, "X-Forwarded-For"):
        for token in str(forwarded).split(","):
            token = token.strip()
            if is_valid_ip(token):
                return token

    real_ips = header_values(headers, "X-Real-IP")
    if real_ips:
        real_ip = str(real_ips[0]).strip()
        if is_valid_ip(real_ip):
            return real_ip

    parts = split_host_port(remote_addr)
    if parts is not None and is_valid_ip(parts[0]):
        return parts[0]

    return remote_addr or ""
