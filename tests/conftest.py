"""Global test fixtures."""

import pytest

from reportkit import config, mail


@pytest.fixture(autouse=True)
def fresh_registry():
    """Give every test its own shared registry and an empty outbox."""
    config.reset_registry()
    mail.outbox = []
    yield config.get_registry()
    config.reset_registry()


@pytest.fixture
def registry():
    """A registry that is not the shared one."""
    registry = config.Config()
    yield registry
    registry.close()
