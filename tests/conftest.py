"""Shared fixtures."""

import sys

import pytest
from loguru import logger

from bashgate.gate.engine import CommandGate
from bashgate.gate.rules import load_rules


@pytest.fixture(autouse=True)
def _reset_logger():
    """CLI commands replace loguru sinks; restore the default after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture(scope="session")
def rules():
    return load_rules()


@pytest.fixture
def gate(rules):
    return CommandGate(rules)
