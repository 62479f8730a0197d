from .status_registry import (
    DEFAULT_STATUS_PROFILES,
    StatusProfile,
    StatusRegistry,
)
from .client_ip import resolve_client_ip
from .request_info import RequestSnapshot, UNKNOWN_SNAPSHOT, extract_request_info

from .response_handler import (
    ErrorDetail,
    FlaskResponseWriter,
    ResponseDispatcher,
    ResponseEnvelope,
    get_dispatcher,
)
from .logger_config import setup_logging
