"""Pytest configuration and fixtures for logkeeper tests.

Provides reusable fixtures for unit and integration tests including
isolated log paths, logger factories, a patched process terminator and
mocked SMTP connections.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

# Keep the default instance away from real signal handlers during tests
os.environ.setdefault("LOG_HANDLE_SIGNALS", "false")
os.environ.setdefault("LOG_CONSOLE_DISABLED", "true")

from logkeeper.keeper import LogKeeper  # noqa: E402
from logkeeper.models.log_config import LoggerConfig  # noqa: E402
from logkeeper.models.mail_config import MailConfig  # noqa: E402


# =============================================================================
# Configuration Fixtures
# =============================================================================
@pytest.fixture
def mail_config() -> MailConfig:
    """Create a complete MailConfig for testing."""
    return MailConfig(
        host="smtp.test.com",
        port=465,
        username="logs@test.com",
        password="testpassword",
        from_name="Log Service",
        subject="Service logs",
        recipients=["ops@test.com", "dev@test.com"],
        timeout=10,
    )


@pytest.fixture
def log_path(tmp_path) -> str:
    """Path of the active log file inside an isolated directory."""
    return str(tmp_path / "logs" / "app.log")


@pytest.fixture
def make_config(log_path: str) -> Callable[..., LoggerConfig]:
    """Factory for LoggerConfig with test-friendly defaults."""

    def _make(**overrides: Any) -> LoggerConfig:
        values: dict[str, Any] = {
            "path": log_path,
            "console_disabled": True,
            "handle_signals": False,
            "flush_interval": 3600,
        }
        values.update(overrides)
        return LoggerConfig(**values)

    return _make


# =============================================================================
# Logger Fixtures
# =============================================================================
@pytest.fixture
def make_keeper(
    make_config: Callable[..., LoggerConfig],
) -> Generator[Callable[..., LogKeeper], None, None]:
    """Factory for LogKeeper instances that are closed after the test."""
    keepers: list[LogKeeper] = []

    def _make(level: Any = "DEBUG", mail_transport: Any = None, **overrides: Any) -> LogKeeper:
        keeper = LogKeeper(make_config(**overrides), level=level, mail_transport=mail_transport)
        keepers.append(keeper)
        return keeper

    yield _make

    for keeper in keepers:
        keeper.close()


@pytest.fixture
def terminate() -> Generator[MagicMock, None, None]:
    """Replace process termination with a mock."""
    with patch("logkeeper.keeper._terminate") as mock_terminate:
        yield mock_terminate


@pytest.fixture
def mail_transport() -> MagicMock:
    """Mock mail transport accepting every delivery."""
    return MagicMock(return_value=None)


# =============================================================================
# SMTP Fixtures
# =============================================================================
@pytest.fixture
def mock_smtp_connection() -> MagicMock:
    """Create a mock SMTP connection."""
    smtp = MagicMock()
    smtp.send_message.return_value = {}
    smtp.starttls.return_value = (220, b"TLS ready")
    smtp.login.return_value = (235, b"Authentication successful")
    smtp.quit.return_value = (221, b"Bye")
    return smtp

