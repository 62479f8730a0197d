"""
Response Handler Module

This module provides the dispatcher that builds standardized JSON responses
across the application. Every response gets the same envelope, the same
safety headers and exactly one log record tying it to the request it answers.

Invalid status codes are silently corrected to 500 and nothing in here raises
back to the caller: a failure is only ever reported through the logger.
"""

import logging
from dataclasses import dataclass

from flask import Response, current_app, has_request_context, json
from flask import request as current_request
from werkzeug.exceptions import HTTPException

from .request_info import UNKNOWN_SNAPSHOT, extract_request_info
from .status_registry import StatusRegistry

EXTENSION_NAME = "json_responses"

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

DEFAULT_HEADERS = (
    ("Content-Type", "application/json"),
    ("X-Content-Type-Options", "nosniff"),
    ("Cache-Control", "no-cache, no-store, must-revalidate"),
)


@dataclass
class ErrorDetail:
    """Error block of an envelope: a category tag and optional per-field messages."""
    type: str
    details: dict = None

    def to_dict(self):
        payload = {"type": self.type}
        if self.details:
            payload["details"] = self.details
        return payload


@dataclass
class ResponseEnvelope:
    """
    Top-level JSON object returned for every response.

    Attributes:
        status (str): ``"success"`` or ``"error"``.
        status_code (int): HTTP status code of the response.
        message (str): Human readable message.
        data (optional): Payload, omitted from the JSON when None.
        error (ErrorDetail, optional): Error block, omitted from the JSON when None.
    """
    status: str
    status_code: int
    message: str
    data: object = None
    error: ErrorDetail = None

    def to_dict(self):
        payload = {
            "status": self.status,
            "status_code": self.status_code,
            "message": self.message,
        }
        if self.data is not None:
            payload["data"] = self.data
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        return payload


class FlaskResponseWriter:
    """
    Writes headers, status and body onto a ``flask.Response``.

    Any object with ``set_header``, ``write_status`` and ``write_body`` can be
    passed to ``ResponseDispatcher.dispatch`` instead.
    """

    def __init__(self, response=None):
        self.response = response if response is not None else Response()

    def set_header(self, name, value):
        self.response.headers[name] = value

    def write_status(self, status_code):
        self.response.status_code = status_code

    def write_body(self, body):
        self.response.set_data(body)


class ResponseDispatcher:
    """
    Builds JSON responses and logs them.

    Args:
        registry (StatusRegistry, optional): Status profiles. Defaults to the
                                             built-in profiles.
        logger (logging.Logger, optional): Logger for response records.
                                           Defaults to this module's logger.
    """

    def __init__(self, registry=None, logger=None):
        self.logger = logger or logging.getLogger(__name__)
        if registry is None:
            registry = StatusRegistry(logger=self.logger)
        self.registry = registry

    def dispatch(self, writer, request, status_code, message="", data=None, error_details=None):
        """
        Writes a standardized JSON response and logs it.

        Args:
            writer: Response writer (``set_header``, ``write_status``, ``write_body``).
            request: The inbound request, or None when there is no request context.
            status_code (int): HTTP status code. Invalid codes become 500.
            message (str, optional): Response message. Empty picks a default.
            data (optional): Payload. Carried through as given, even on errors.
            error_details (dict, optional): Per-field error messages for error responses.
        """
        status_code = self.registry.validate(status_code)

        if request is None:
            snapshot = UNKNOWN_SNAPSHOT
            self.logger.warning("JSON response dispatched without a request context")
        else:
            snapshot = extract_request_info(request)

        message = self.registry.resolve_message(status_code, message)

        error = None
        if status_code >= 400:
            status = STATUS_ERROR
            error = ErrorDetail(self.registry.error_type_for(status_code), error_details)
        else:
            status = STATUS_SUCCESS

        log_extra = {
            "status_code": status_code,
            "status": status,
            # "message" is a reserved LogRecord attribute
            "response_message": message,
            **snapshot.as_log_extra(),
        }
        if error is not None:
            log_extra["error_type"] = error.type
            log_extra["error_details"] = error.details

        envelope = ResponseEnvelope(status, status_code, message, data, error)
        try:
            for name, value in DEFAULT_HEADERS:
                writer.set_header(name, value)
            writer.write_status(status_code)

            try:
                body = json.dumps(envelope.to_dict(), sort_keys=False)
            except (TypeError, ValueError, OverflowError, RecursionError) as e:
                self.logger.error(
                    "Failed to encode JSON response",
                    extra={**log_extra, "encoding_error": str(e)}
                )
                return

            writer.write_body(body.encode("utf-8"))
        except Exception as e:
            self.logger.error(
                "Failed to write JSON response",
                exc_info=True,
                extra={**log_extra, "write_error": str(e)}
            )
            return

        if status_code >= 500:
            log_message = "HTTP server error response sent"
        elif status_code >= 400:
            log_message = "HTTP client error response sent"
        else:
            log_message = "HTTP response sent"

        self.logger.log(self.registry.log_level_for(status_code), log_message, extra=log_extra)

    def respond(self, status_code, message="", data=None, error_details=None, request=None):
        """
        Creates a standardized Flask response.

        Uses the active Flask request when ``request`` is not given.

        Returns:
            flask.Response: The response, ready to be returned from a view.
        """
        if request is None and has_request_context():
            request = current_request

        writer = FlaskResponseWriter()
        self.dispatch(writer, request, status_code, message, data, error_details)
        return writer.response

    def init_app(self, app):
        """
        Registers the dispatcher on a Flask app and installs JSON error handlers.

        Framework errors (unknown routes, wrong methods, aborts) and unhandled
        exceptions are answered with the same envelope as regular responses.
        """
        app.extensions[EXTENSION_NAME] = self
        app.register_error_handler(HTTPException, self._handle_http_exception)
        app.register_error_handler(Exception, self._handle_exception)

    def _handle_http_exception(self, e):
        # Redirects and other non-error codes keep werkzeug's own response
        if e.code is None or e.code < 400:
            return e
        response = self.respond(e.code)
        # Keep headers such as Allow on 405 responses
        for name, value in e.get_headers():
            if name.lower() != "content-type":
                response.headers[name] = value
        return response

    def _handle_exception(self, e):
        self.logger.error(
            f"Unhandled exception: {str(e)}",
            exc_info=True,
            extra={"exception_type": type(e).__name__}
        )
        return self.respond(500)


def get_dispatcher():
    """Return the dispatcher registered on the current Flask app."""
    return current_app.extensions[EXTENSION_NAME]
