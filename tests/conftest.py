"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the calltrace test suite.
"""

import types
from collections.abc import Generator

import pytest

from calltrace import Namespace

# =============================================================================
# Plugin Registration
# =============================================================================

pytest_plugins = [
    "tests.fixtures.logging",
]


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (may use filesystem or subprocesses)"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests (full system integration)"
    )
    config.addinivalue_line("markers", "property: Property-based tests")


# =============================================================================
# Shared Fixtures
# =============================================================================


def add(a, b):
    return a + b


def mul(a, b):
    return a * b


@pytest.fixture
def math_ns() -> Namespace:
    """
    Provide a binding table with a small math namespace.

    Returns:
        Namespace: ns.math.add and ns.math.mul
    """
    return Namespace(math={"add": add, "mul": mul})


@pytest.fixture
def scratch_module() -> Generator[types.ModuleType, None, None]:
    """
    Provide a throwaway module registered in sys.modules.

    Yields:
        ModuleType: Module named "calltrace_scratch" with a `double` function
    """
    import sys

    mod = types.ModuleType("calltrace_scratch")

    def double(x):
        return x * 2

    mod.double = double
    sys.modules[mod.__name__] = mod
    try:
        yield mod
    finally:
        sys.modules.pop(mod.__name__, None)


# =============================================================================
# Test Collection Hooks
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to add markers.

    Args:
        config: Pytest config object
        items: List of collected test items
    """
    # Add 'unit' marker to tests without other markers
    for item in items:
        if not any(
            mark.name in ["integration", "e2e"] for mark in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)
