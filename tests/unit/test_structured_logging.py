"""Unit tests for structured logging."""

import json
import logging

from stratify.core.request_context import bind_session_id, request_id_context
from stratify.core.structured_logging import log_json

logger = logging.getLogger("stratify.tests")


def _payload(caplog) -> dict:
    return json.loads(caplog.records[-1].getMessage())


def test_credentials_are_masked(caplog):
    with caplog.at_level(logging.INFO, logger="stratify.tests"):
        log_json(logger, logging.INFO, "login_attempt", email="john@company.com", password="demo123")

    payload = _payload(caplog)
    assert payload["event"] == "login_attempt"
    assert payload["email"] == "john@company.com"
    assert payload["password"] == "***"


def test_request_and_session_ids_are_attached(caplog):
    with caplog.at_level(logging.INFO, logger="stratify.tests"):
        with request_id_context("req-123"):
            bind_session_id("sess-abc")
            log_json(logger, logging.INFO, "asset_created", asset_id="1")

    payload = _payload(caplog)
    assert payload["request_id"] == "req-123"
    assert payload["session_id"] == "sess-abc"


def test_no_correlation_outside_a_request(caplog):
    with caplog.at_level(logging.INFO, logger="stratify.tests"):
        log_json(logger, logging.INFO, "startup")

    payload = _payload(caplog)
    assert "request_id" not in payload
    assert "session_id" not in payload
