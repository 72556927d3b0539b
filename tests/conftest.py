"""Pytest fixtures for loyalty ledger tests.

Common fixtures for building ledgers with a known administrator.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

from typing import Iterator

import pytest

from loyalty_ledger import config as ledger_config
from loyalty_ledger.ledger import (
    EventLogger,
    LedgerService,
    OwnershipRegistry,
    SingleAdministrator,
    TokenLedger,
)

ADMIN = "admin"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "scenario(name): mark test as covering a named acceptance scenario. "
        "Usage: @pytest.mark.scenario('A')"
    )


@pytest.fixture(autouse=True)
def _fresh_config() -> Iterator[None]:
    """Each test starts with no cached global config."""
    ledger_config.reset_config()
    yield
    ledger_config.reset_config()


@pytest.fixture
def admin() -> str:
    """The administrator identity used by ledger fixtures."""
    return ADMIN


@pytest.fixture
def registry() -> OwnershipRegistry:
    """Create an empty OwnershipRegistry."""
    return OwnershipRegistry()


@pytest.fixture
def events() -> EventLogger:
    """Create an in-memory EventLogger."""
    return EventLogger()


@pytest.fixture
def ledger(registry: OwnershipRegistry, events: EventLogger) -> TokenLedger:
    """Create a fresh TokenLedger administered by ADMIN."""
    return TokenLedger(
        authority=SingleAdministrator(ADMIN),
        registry=registry,
        events=events,
    )


@pytest.fixture
def service(ledger: TokenLedger) -> LedgerService:
    """Create a LedgerService over the fresh ledger."""
    return LedgerService(ledger)
