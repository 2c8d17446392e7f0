"""Shared fixtures for memberaccess tests."""

from __future__ import annotations

import pytest

from memberaccess.registry import AccessorRegistry, RegistryOptions


@pytest.fixture
def registry() -> AccessorRegistry:
    """A fresh registry so cached accessors never leak between tests."""
    return AccessorRegistry()


@pytest.fixture
def case_sensitive_registry() -> AccessorRegistry:
    return AccessorRegistry(RegistryOptions(ignore_case=False))
