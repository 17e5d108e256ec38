"""Shared pytest fixtures for the Lox interpreter test suite."""

from __future__ import annotations

import pytest

from lox.interpreter import Interpreter


@pytest.fixture
def output() -> list[str]:
    return []


@pytest.fixture
def interpreter(output):
    """An interpreter whose printed lines land in the ``output`` fixture."""
    return Interpreter(output=output.append)
