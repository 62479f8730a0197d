import logging

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "basic: Basic route tests")
    config.addinivalue_line("markers", "registry: Status registry tests")
    config.addinivalue_line("markers", "client_ip: Client IP resolution tests")
    config.addinivalue_line("markers", "dispatch: Response dispatcher tests")
    config.addinivalue_line("markers", "logging: Logging configuration tests")
    config.addinivalue_line("markers", "errors: Error handling tests")


class RecordingWriter:
    """
    Response writer that keeps everything it is given.

    ``calls`` lists the operations in the order they happened.
    """

    def __init__(self):
        self.headers = {}
        self.status_code = None
        self.body = None
        self.calls = []

    def set_header(self, name, value):
        self.calls.append("set_header")
        self.headers[name] = value

    def write_status(self, status_code):
        self.calls.append("write_status")
        self.status_code = status_code

    def write_body(self, body):
        self.calls.append("write_body")
        self.body = body


@pytest.fixture
def writer():
    """
    Pytest fixture providing a fresh recording response writer.

    Returns:
        RecordingWriter: Writer that records headers, status and body.
    """
    return RecordingWriter()


@pytest.fixture
def test_logger(caplog):
    """
    Pytest fixture providing a logger whose records are captured by caplog.

    Returns:
        logging.Logger: Logger named ``tests.responses``.
    """
    caplog.set_level(logging.DEBUG)
    return logging.getLogger("tests.responses")
