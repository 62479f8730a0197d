"""
Status Registry Module

This module holds the per-status-code profiles (default message, error type
and log level) used when building standardized JSON responses, together with
the helpers that validate status codes and pick a message for a response.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType

FALLBACK_STATUS_CODE = 500
UNKNOWN_ERROR_TYPE = "unknown_error"


@dataclass(frozen=True)
class StatusProfile:
    """
    Configuration attached to a single HTTP status code.

    Attributes:
        default_message (str): Message used when the caller does not provide one.
        error_type (str): Category tag reported in error envelopes. Empty for
                          non-error codes.
        log_level (int): ``logging`` level used when the response is logged.
    """
    default_message: str
    error_type: str = ""
    log_level: int = logging.INFO


DEFAULT_STATUS_PROFILES = {
    # Success responses
    200: StatusProfile("Request was successful"),
    201: StatusProfile("Resource created successfully"),
    202: StatusProfile("Request accepted"),
    204: StatusProfile("Request completed successfully"),

    # Client error responses
    400: StatusProfile("The request contains invalid data",
                       "validation_error", logging.WARNING),
    401: StatusProfile("Authentication is required to access this resource",
                       "authentication_error", logging.WARNING),
    403: StatusProfile("You do not have permission to access this resource",
                       "authorization_error", logging.WARNING),
    404: StatusProfile("The requested resource was not found",
                       "not_found", logging.INFO),
    405: StatusProfile("The requested method is not allowed for this resource",
                       "method_not_allowed", logging.WARNING),
    409: StatusProfile("The request could not be completed due to a conflict "
                       "with the current state of the resource",
                       "conflict", logging.WARNING),
    422: StatusProfile("The request was well-formed but could not be processed "
                       "due to semantic errors",
                       "unprocessable_entity", logging.WARNING),
    429: StatusProfile("Too many requests have been made in a given amount of time",
                       "rate_limit_exceeded", logging.WARNING),

    # Server error responses
    500: StatusProfile("An unexpected error occurred on the server",
                       "internal_server_error", logging.ERROR),
    501: StatusProfile("The requested functionality is not implemented",
                       "not_implemented", logging.ERROR),
    502: StatusProfile("The server received an invalid response from an upstream server",
                       "bad_gateway", logging.ERROR),
    503: StatusProfile("The server is currently unable to handle the request due "
                       "to temporary overload or maintenance",
                       "service_unavailable", logging.ERROR),
    504: StatusProfile("The server did not receive a timely response from an upstream server",
                       "gateway_timeout", logging.ERROR),
    505: StatusProfile("The server does not support the HTTP protocol version "
                       "used in the request",
                       "http_version_not_supported", logging.ERROR),
    506: StatusProfile("The server has an internal configuration error and "
                       "cannot complete the request",
                       "variant_also_negotiates", logging.ERROR),
}

# Messages used for codes without a registered profile, keyed by status class
_CLASS_FALLBACK_MESSAGES = {
    2: "Request completed successfully",
    3: "Request requires further action",
    4: "Client error occurred",
    5: "Server error occurred",
}
_GENERIC_FALLBACK_MESSAGE = "Response completed"


class StatusRegistry:
    """
    Read-only lookup of status profiles.

    A registry is built once while the application starts and then shared by
    every request. ``extend`` never mutates the registry it is called on; it
    returns a new one, so readers can never observe a half-updated mapping.
    """

    def __init__(self, profiles=None, logger=None):
        if profiles is None:
            profiles = DEFAULT_STATUS_PROFILES
        self._profiles = MappingProxyType(dict(profiles))
        self._logger = logger or logging.getLogger(__name__)

    def __contains__(self, status_code):
        return status_code in self._profiles

    def __len__(self):
        return len(self._profiles)

    def __repr__(self):
        return f"StatusRegistry(codes={list(self.codes())})"

    def codes(self):
        """Return the registered status codes in ascending order."""
        return sorted(self._profiles)

    def lookup(self, status_code):
        """
        Looks up the profile registered for a status code.

        Args:
            status_code (int): HTTP status code.

        Returns:
            tuple: ``(profile, found)``. ``profile`` is None when ``found`` is False.
        """
        profile = self._profiles.get(status_code)
        return profile, profile is not None

    def extend(self, status_code, profile):
        """
        Returns a new registry with ``profile`` registered for ``status_code``.

        Registering a code that already exists replaces its profile and logs a
        warning. Meant to be used while wiring the application, before traffic.

        Args:
            status_code (int): HTTP status code to register.
            profile (StatusProfile): Profile for the code.

        Returns:
            StatusRegistry: The extended registry.
        """
        if status_code in self._profiles:
            self._logger.warning(
                f"Status code {status_code} already exists, updating configuration",
                extra={"status_code": status_code}
            )
        profiles = dict(self._profiles)
        profiles[status_code] = profile
        return StatusRegistry(profiles, logger=self._logger)

    def validate(self, status_code):
        """
        Validates an HTTP status code.

        Codes outside 100-599 (or values that are not integers at all) are
        replaced by 500 and a warning is logged. This never raises: the caller
        always gets a usable status code back.

        Args:
            status_code (int): Status code supplied by the caller.

        Returns:
            int: The status code to send.
        """
        try:
            code = int(status_code)
        except (TypeError, ValueError, OverflowError):
            code = None
        # Fractional codes such as 404.9 are not truncated
        if isinstance(status_code, float) and code != status_code:
            code = None
        if isinstance(status_code, bool) or code is None or not 100 <= code <= 599:
            self._logger.warning(
                f"Invalid HTTP status code provided, using {FALLBACK_STATUS_CODE}",
                extra={"provided_code": repr(status_code)}
            )
            return FALLBACK_STATUS_CODE
        return code

    def resolve_message(self, status_code, provided_message=""):
        """
        Picks the message for a response.

        Args:
            status_code (int): Validated status code.
            provided_message (str, optional): Message supplied by the caller.

        Returns:
            str: ``provided_message`` if non-empty, otherwise the registered
                 default message, otherwise a message for the code's class.
        """
        if provided_message:
            return provided_message

        profile, found = self.lookup(status_code)
        if found:
            return profile.default_message

        return _CLASS_FALLBACK_MESSAGES.get(status_code // 100, _GENERIC_FALLBACK_MESSAGE)

    def error_type_for(self, status_code):
        """Return the error type tag for a code, or ``unknown_error``."""
        profile, found = self.lookup(status_code)
        if found and profile.error_type:
            return profile.error_type
        return UNKNOWN_ERROR_TYPE

    def log_level_for(self, status_code):
        """Return the logging level used when a response with this code is sent."""
        profile, found = self.lookup(status_code)
        if found:
            return profile.log_level
        if status_code >= 500:
            return logging.ERROR
        if status_code >= 400:
            return logging.WARNING
        return logging.INFO
