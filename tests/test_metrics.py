import logging

import pytest

from salestrack.jwt_utils import JWTError, decode
from salestrack.metrics import InMemoryMetrics, increment, reset_metrics, set_metrics
from salestrack.metrics_logging import LoggingMetrics


@pytest.fixture
def counters():
    m = InMemoryMetrics()
    set_metrics(m)
    yield m
    reset_metrics()


def test_rejected_tokens_are_counted(counters):
    with pytest.raises(JWTError):
        decode("a.b", secret="s")
    assert counters.total("auth.token_rejected", reason="malformed") == 1


def test_login_and_rate_limit_counters(client, counters):
    client.post("/api/auth/login", json={"email": "none@example.com", "password": "Passw0rd1"})
    assert counters.total("auth.login", outcome="failure") == 1
    assert counters.total("rate_limit.hit", name="auth", outcome="allow") == 1
    assert counters.total("rate_limit.hit", name="api") == 1


def test_logging_backend(caplog):
    set_metrics(LoggingMetrics())
    try:
        with caplog.at_level(logging.INFO, logger="salestrack.metrics"):
            increment("auth.login", {"outcome": "success"})
    finally:
        reset_metrics()
    assert "metric auth.login outcome=success" in caplog.text
