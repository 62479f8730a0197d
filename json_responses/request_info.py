"""
Request Info Module

Builds the small snapshot of request metadata that is attached to every
response log record.
"""

from dataclasses import dataclass, asdict
from urllib.parse import urlsplit

from .client_ip import header_values, resolve_client_ip

UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class RequestSnapshot:
    """
    Request metadata captured for logging.

    Attributes:
        method (str): HTTP method.
        path (str): URL path, without the query string.
        user_agent (str): ``User-Agent`` header, empty if absent.
        remote_ip (str): Client address as resolved by ``resolve_client_ip``.
    """
    method: str
    path: str
    user_agent: str
    remote_ip: str

    def as_log_extra(self):
        return asdict(self)


UNKNOWN_SNAPSHOT = RequestSnapshot(
    method=UNKNOWN,
    path=UNKNOWN,
    user_agent=UNKNOWN,
    remote_ip=UNKNOWN,
)


def _request_path(request):
    path = getattr(request, "path", None)
    if path is None:
        path = urlsplit(getattr(request, "url", "") or "").path
    return path


def extract_request_info(request):
    """
    Extracts a RequestSnapshot from an inbound request.

    Accepts a Flask/werkzeug request or any object with ``method``, ``path``
    (or ``url``), ``headers`` and ``remote_addr`` attributes.

    Args:
        request: The inbound request.

    Returns:
        RequestSnapshot: Snapshot of the request metadata.
    """
    headers = getattr(request, "headers", None)
    user_agents = header_values(headers, "User-Agent")
    user_agent = user_agents[0] if user_agents else ""

    return RequestSnapshot(
        method=getattr(request, "method", "") or "",
        path=_request_path(request),
        user_agent=user_agent,
        remote_ip=resolve_client_ip(headers, getattr(request, "remote_addr", None)),
    )
